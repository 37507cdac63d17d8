# xfrpkit

Building blocks for the client side of a frp-style reverse proxy (protocol
version 0.10.0). The package holds the pieces a tunnelling client needs:

- `xfrpkit.msg` – control messages: the one-byte type plus big-endian 32-bit
  length wire format (`pack`, `unpack`), JSON marshalling of login, new-proxy
  and work-connection requests (`login_request_marshal`,
  `new_proxy_service_marshal`, `new_work_conn_marshal`), and parsing of the
  server's responses (`login_resp_unmarshal`, `start_work_conn_resp_unmarshal`,
  `control_response_unmarshal`). Auth keys are the MD5 of the token followed by
  a timestamp (`get_auth_key`, `calc_md5`).
- `xfrpkit.frame` – the 8-byte stream frame header (`Frame`, `Command`,
  `header_size`); `Frame.parse` reads a frame from bytes and
  `Frame.from_message` wraps a bare message.
- `xfrpkit.session` – `SessionIdAllocator`, handing out odd client session ids
  starting from 3.
- `xfrpkit.login` – the client's login state (`Login`, `LoginResponse`,
  `init_login`). `init_login` uses the hardware address of the identifying
  network interface as the run id; `Login.check_response` records whether a
  login succeeded.
- `xfrpkit.proxy` – an async `tcp_relay` between a reader and a writer, and
  FTP passive-mode (`227`) reply handling (`pasv_unpack`, `pasv_pack`,
  `ftp_client_to_server`, `set_ftp_data_proxy_tunnel`) so that data
  connections travel through the tunnel.
- `xfrpkit.compression` – zlib, gzip and raw-deflate helpers
  (`deflate_write`, `inflate_read`).
- `xfrpkit.pbkdf2` – PBKDF2-HMAC with SHA-1, SHA-256 and SHA-512.
- `xfrpkit.utils` – IPv4 address checks, domain name normalisation, network
  interface and MAC lookup, interface listing, and a small HTTP fetch helper
  (`net_visit`).

## Examples

Deriving a key:

```python
from xfrpkit.pbkdf2 import pbkdf2_hmac_sha256

password = b"password"
key = pbkdf2_hmac_sha256(password, b"salt", 4096, 32)
assert key.hex().startswith("c5e478d5")
```

Compressing and restoring a payload:

```python
from xfrpkit.compression import deflate_write, inflate_read

packed = deflate_write(b"hello tunnel", False)
assert inflate_read(packed, False) == b"hello tunnel"
```

Packing a control message and reading it back:

```python
from xfrpkit.msg import Message, MessageType, pack, unpack

wire = pack(Message(MessageType.PING, b"{}"))
assert wire == b"h\x00\x00\x00\x02{}"
assert unpack(wire).type is MessageType.PING
```

Normalising a custom domain and computing an auth digest:

```python
from xfrpkit.utils import dns_unified
from xfrpkit.msg import calc_md5

assert dns_unified("wWw.Example.com") == "www.example.com"
assert calc_md5(b"") == "d41d8cd98f00b204e9800998ecf8427e"
```

Compression failures are raised as `CompressionError`, malformed control
messages as `MessageError`, failed HTTP transfers as `NetVisitError`.

## What the package does not do

xfrpkit is a library of parts, not a running client. It does not read a
configuration file, has no command to start, and does not open or drive the
control connection to a server: the caller connects, sends the marshalled
messages and feeds the responses to the functions above.

## Requirements

Python 3.10 or later and `psutil`, which is used to look up network
interfaces and hardware addresses.