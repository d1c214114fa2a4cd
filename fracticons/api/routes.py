from flask import Blueprint, Response, current_app, jsonify, request

from fracticons.config import Settings
from fracticons.kernel.avatar import AvatarOptions, render
from fracticons.kernel.errors import FracticonError, InvalidOptionError
from fracticons.kernel.hashing import hex_to_bytes, seed_material, sha256_hex

bp = Blueprint("api", __name__, url_prefix="/")

TRUTHY = {"1", "true", "yes", "on"}


def _settings() -> Settings:
    return current_app.config.get("FRACTICONS_SETTINGS") or Settings()


def _int(args, name, default):
    raw = args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InvalidOptionError(f"{name} must be an integer, got {raw!r}") from None


def _float(args, name):
    raw = args.get(name)
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise InvalidOptionError(f"{name} must be a number, got {raw!r}") from None


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in TRUTHY


def options_from_args(args) -> AvatarOptions:
    """Build AvatarOptions from query args or a JSON body, enforcing configured limits."""
    settings = _settings()
    size = _int(args, "size", settings.default_size)
    resolution = _int(args, "resolution", settings.default_resolution)
    if size > settings.max_size:
        raise InvalidOptionError(f"size {size} exceeds the limit of {settings.max_size}")
    if resolution > settings.max_resolution:
        raise InvalidOptionError(f"resolution {resolution} exceeds the limit of {settings.max_resolution}")
    num_colors = _int(args, "colors", 5)
    if num_colors > settings.max_colors:
        raise InvalidOptionError(f"colors {num_colors} exceeds the limit of {settings.max_colors}")

    constant = None
    if args.get("cx") is not None or args.get("cy") is not None:
        constant = (_float(args, "cx"), _float(args, "cy"))

    return AvatarOptions(
        size=size,
        resolution=resolution,
        circular=_flag(args.get("circular")),
        family=args.get("family") or "julia",
        preset=args.get("preset") or None,
        constant=constant,
        palette_style=args.get("palette") or "random",
        num_colors=num_colors,
    )


def _image_response(seed: bytes):
    result = render(seed, options_from_args(request.args))
    if request.args.get("format", "png").lower() == "svg":
        return Response(result.to_svg(_flag(request.args.get("stylized"))), mimetype="image/svg+xml")
    return Response(result.png, mimetype="image/png")


@bp.errorhandler(FracticonError)
def bad_request(e):
    return jsonify({"ok": False, "error": str(e)}), 400


# ---------- health / version ----------
@bp.route("/health")
def health():
    return jsonify({"ok": True})


@bp.route("/version")
def version():
    return jsonify({"name": "Fracticons", "protocol": "frsig://", "api": 1})


# ---------- hashing ----------
@bp.route("/hash")
def hash_value():
    return jsonify({"hash": sha256_hex(request.args.get("value", ""))})


# ---------- images ----------
@bp.route("/avatar/hex/<digest>")
def avatar_from_hex(digest):
    return _image_response(hex_to_bytes(digest))


@bp.route("/avatar/<path:value>")
def avatar(value):
    return _image_response(seed_material(value))


# ---------- metadata ----------
@bp.route("/api/avatar", methods=["POST"])
def api_avatar():
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        data = {}
    if data.get("hex"):
        seed = hex_to_bytes(str(data["hex"]))
    elif "input" in data:
        seed = seed_material(str(data["input"]))
    else:
        raise InvalidOptionError("body needs an 'input' or 'hex' field")
    result = render(seed, options_from_args(data))
    return jsonify({"ok": True, **result.metadata()})
