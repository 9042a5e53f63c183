# imgraft

Building blocks for turning generated images into clean, transparent assets
and reporting the results in a fixed JSON schema.

## Install

```
pip install imgraft
```

For running the tests:

```
pip install "imgraft[test]"
pytest
```

## What is inside

- `imgraft.imaging`: `decode` PNG/JPEG/WebP bytes into a Pillow image,
  `detect_format` from magic bytes, `encode_png`, read width, height and
  MIME type with `inspect_bytes` / `inspect_file` (returning an `ImageMeta`),
  and compute SHA-256 digests with `sha256_of_bytes` / `sha256_of_file`.
- `imgraft.background`: `remove_background` estimates the background colour
  from the four 3x3 corners and makes near pixels transparent (with a linear
  fade and 3x3 alpha smoothing), `trim_transparent` crops to the
  non-transparent bounding box, and `transparent_pipeline` does both.
  `DEFAULT_THRESHOLD` is 40.
- `imgraft.save`: `save_png` writes PNG data to disk and returns an
  `ImageItem`; `generate_filename` picks a collision-free name such as
  `imgraft-20260324-153012-001.png` (sequence 001 to 999). `SaveOptions`
  holds `output_path`, `directory`, `clock`, `index` and
  `transparent_applied`.
- `imgraft.output`: the JSON output contract (`Output`, `ImageItem`,
  `RateLimit`, `OutputError`), the constructors `new_success_output`,
  `new_error_output` and `new_empty_rate_limit`, and `encode` for compact or
  pretty printing to a text stream.
- `imgraft.ratelimit`: `parse_headers` reads rate-limit and `Retry-After`
  headers into a `RateLimitInfo`; `to_output()` converts it to the output
  `RateLimit`.
- `imgraft.reference`: the `ReferenceImage` type, `validate` (at most 8
  images, 20 MB each, 4096x4096, PNG/JPEG/WebP), `validate_url` (http/https
  only; localhost, loopback and private addresses are refused) and
  `load_local_file`.
- `imgraft.fetch`: `load_remote_file` fetches an image over http(s) with at
  most 3 redirects, a 20 second total timeout and a 20 MB limit;
  `load_references` loads a list of paths and URLs in order, failing on the
  first error. `set_http_transport` swaps in an `httpx` transport.
- `imgraft.model`: `resolve` turns the `flash`/`pro` aliases into model
  names, `resolve_aliases_from_models` derives aliases from a model list,
  and `fallback_model`, `is_fallback_error` and `fallback_warning` handle
  pro-to-flash fallback.
- `imgraft.prompt`: `build` assembles `Part` objects, adding the
  green-screen `system_prompt` in transparent mode.
- `imgraft.runtime`: `Clock`, `SystemClock`, `FixedClock`,
  `get_with_default`, and the paths `config_dir`, `config_file_path` and
  `credentials_file_path` under `~/.config/imgraft`.
- `imgraft.errors`: `CodedError` and `ErrorCode`; every failure carries a
  stable code, and `code_of(err)` finds it in an exception chain.

## Example

```python
import sys

from imgraft.background import transparent_pipeline
from imgraft.imaging import decode, encode_png
from imgraft.output import encode, new_success_output
from imgraft.save import SaveOptions, save_png

with open("generated.png", "rb") as fh:
    img, fmt = decode(fh.read())

trimmed, applied = transparent_pipeline(img, 40.0)
item = save_png(encode_png(trimmed), SaveOptions(directory="out", transparent_applied=applied))

out = new_success_output()
out.images.append(item)
encode(sys.stdout, out, pretty=True)
```

## What it does not do

The package has no command-line program and does not talk to any image
generation service: it does not send prompts, receive generated images or
store API keys. `imgraft.runtime` only reports where the configuration and
credentials files live; nothing here reads or writes them.