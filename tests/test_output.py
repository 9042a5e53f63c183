import io
import json

from imgraft.output import (
    ImageItem,
    Output,
    OutputError,
    RateLimit,
    encode,
    new_empty_rate_limit,
    new_error_output,
    new_success_output,
)


def _encode(out, pretty=False):
    buf = io.StringIO()
    encode(buf, out, pretty)
    return buf.getvalue()


def test_encode_success_minimal():
    m = json.loads(_encode(new_success_output()))
    assert m["success"] is True
    assert m["images"] == []
    assert m["warnings"] == []


def test_encode_error_output():
    m = json.loads(_encode(new_error_output("INVALID_ARGUMENT", "prompt is required")))
    assert m["success"] is False
    assert m["images"] == []
    assert m["error"]["code"] == "INVALID_ARGUMENT"
    assert m["error"]["message"] == "prompt is required"


def test_encode_pretty_print():
    assert "\n  " in _encode(new_success_output(), pretty=True)


def test_encode_compact_output():
    assert len(_encode(new_success_output()).strip().split("\n")) == 1


def test_encode_images_none_to_empty_array():
    out = Output(success=False, images=None, rate_limit=new_empty_rate_limit(), warnings=[])
    m = json.loads(_encode(out))
    assert m["images"] == []


def test_encode_warnings_none_to_empty_array():
    out = Output(success=False, images=[], rate_limit=new_empty_rate_limit(), warnings=None)
    m = json.loads(_encode(out))
    assert m["warnings"] == []


def test_encode_full_success_output():
    out = new_success_output()
    out.model = "gemini-3.1-flash-image-preview"
    out.backend = "google_ai_studio"
    out.images = [
        ImageItem(
            index=0,
            path="/abs/path/imgraft-20260324-153012-001.png",
            filename="imgraft-20260324-153012-001.png",
            width=1024,
            height=1024,
            mime_type="image/png",
            sha256="e3b0c44298fc1c149afbf4c8996fb924",
            transparent_applied=True,
        )
    ]
    out.warnings = ["fallback from pro to flash"]
    out.rate_limit = RateLimit(provider="google_ai_studio")

    m = json.loads(_encode(out))
    assert m["success"] is True
    assert m["model"] == "gemini-3.1-flash-image-preview"
    assert m["backend"] == "google_ai_studio"
    assert len(m["images"]) == 1
    img = m["images"][0]
    assert img["index"] == 0
    assert img["width"] == 1024
    assert img["transparent_applied"] is True
    assert m["warnings"] == ["fallback from pro to flash"]
    assert m["rate_limit"]["provider"] == "google_ai_studio"


def test_new_success_output():
    out = new_success_output()
    assert out.success is True
    assert out.model is None
    assert out.backend is None
    assert out.images == []
    assert out.warnings == []
    assert out.error.code is None
    assert out.error.message is None


def test_new_error_output():
    out = new_error_output("AUTH_REQUIRED", "api key not found")
    assert out.success is False
    assert out.images == []
    assert out.error.code == "AUTH_REQUIRED"
    assert out.error.message == "api key not found"


def test_encode_produces_valid_json():
    text = _encode(new_error_output("INTERNAL_ERROR", "something went wrong"))
    assert json.loads(text)["error"]["code"] == "INTERNAL_ERROR"


def test_encode_trailing_newline():
    assert _encode(new_success_output()).endswith("\n")


def test_encode_escapes_html_characters():
    out = new_success_output()
    out.model = "<a&b>"
    text = _encode(out)
    assert "<" not in text and ">" not in text and "&" not in text
    assert json.loads(text)["model"] == "<a&b>"


def test_encode_does_not_mutate_output():
    out = Output(images=None, warnings=None)
    _encode(out)
    assert out.images is None
    assert out.warnings is None


def test_output_schema_fields_always_present():
    m = new_success_output().to_dict()
    for key in ["success", "model", "backend", "images", "rate_limit", "warnings", "error"]:
        assert key in m


def test_output_schema_null_fields():
    m = json.loads(json.dumps(new_success_output().to_dict()))
    assert m["model"] is None
    assert m["backend"] is None
    assert m["error"]["code"] is None
    assert m["error"]["message"] is None


def test_output_schema_error_fields_always_present():
    m = new_success_output().to_dict()
    assert set(m["error"]) == {"code", "message"}


def test_rate_limit_null_initial():
    m = new_empty_rate_limit().to_dict()
    keys = [
        "provider",
        "limit_type",
        "requests_limit",
        "requests_remaining",
        "requests_used",
        "reset_at",
        "retry_after_seconds",
    ]
    assert sorted(m) == sorted(keys)
    assert all(m[key] is None for key in keys)


def test_rate_limit_all_fields_present():
    rl = RateLimit(
        provider="google_ai_studio",
        limit_type="per_minute",
        requests_limit=60,
        requests_remaining=55,
        requests_used=5,
        reset_at="2026-03-28T12:00:00Z",
        retry_after_seconds=30,
    )
    m = json.loads(json.dumps(rl.to_dict()))
    assert m["provider"] == "google_ai_studio"
    assert m["requests_limit"] == 60


def test_image_item_all_fields():
    item = ImageItem(
        index=0,
        path="/abs/path/imgraft-20260324-153012-001.png",
        filename="imgraft-20260324-153012-001.png",
        width=1024,
        height=1024,
        mime_type="image/png",
        sha256="abc123",
        transparent_applied=True,
    )
    m = item.to_dict()
    for key in [
        "index",
        "path",
        "filename",
        "width",
        "height",
        "mime_type",
        "sha256",
        "transparent_applied",
    ]:
        assert key in m
    assert m["transparent_applied"] is True


def test_output_error_to_dict():
    assert OutputError("X", "y").to_dict() == {"code": "X", "message": "y"}