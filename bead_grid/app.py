from __future__ import annotations

import logging
from dataclasses import asdict, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple

from flask import Flask, jsonify, request

from .config import SETTINGS, VENDORS, configure_logging
from .errors import DecodeError, SurfaceUnavailableError
from .infrastructure.decode import ImageSource
from .infrastructure.session import GridSession
from .processing.filters import FilterStyle, filter_palette
from .processing.palette import GridCell, PaletteEntry, hex_to_rgb, load_palette
from .processing.pipeline import Grid, build_grid_sync, count_colors, grid_to_dict, vendor_labels
from .processing.sampling import ScalingPolicy
from .responses import error_response, render_grid_image, send_png

APP_VERSION = "1.0.0"

logger = logging.getLogger(__name__)

_CHOICES = {
    "filter_style": [style.value for style in FilterStyle],
    "scaling_policy": [policy.value for policy in ScalingPolicy],
    "default_vendor": list(VENDORS),
}


def _json_object() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError("JSON body must be an object")
    return payload


def _params() -> Dict[str, Any]:
    payload = _json_object()
    merged: Dict[str, Any] = dict(request.form.items())
    merged.update(payload)
    merged.update(request.args.items())
    return merged


def parse_grid_options(args: Mapping[str, Any]) -> Tuple[int, FilterStyle, ScalingPolicy, str]:
    """Read ``size``, ``style``, ``policy`` and ``vendor`` from request arguments."""

    try:
        size = int(args.get("size", SETTINGS.grid_size))
    except (TypeError, ValueError):
        raise ValueError("size must be an integer") from None
    if not SETTINGS.grid_min <= size <= SETTINGS.grid_max:
        raise ValueError(f"size must be between {SETTINGS.grid_min} and {SETTINGS.grid_max}")

    style = FilterStyle(str(args.get("style", SETTINGS.filter_style)).lower())
    policy = ScalingPolicy(str(args.get("policy", SETTINGS.scaling_policy)).lower())
    vendor = str(args.get("vendor", SETTINGS.default_vendor))
    if vendor not in VENDORS:
        raise ValueError(f"vendor must be one of {', '.join(VENDORS)}")
    return size, style, policy, vendor


def _image_source(args: Mapping[str, Any]) -> ImageSource:
    upload = request.files.get("image")
    if upload is not None:
        return upload.read()
    source = args.get("source")
    if isinstance(source, str) and source.lower().startswith(("data:", "http://", "https://")):
        return source
    raise ValueError("Provide an 'image' file upload or a data/http(s) 'source' URL")


def find_palette_cell(palette: List[PaletteEntry], hex_value: str) -> Optional[GridCell]:
    rgb = hex_to_rgb(hex_value)
    if rgb is None:
        return None
    for entry in palette:
        if entry.rgb == rgb:
            return GridCell(entry.hex, entry.codes)
    return None


def _grid_payload(grid: Grid, vendor: str) -> Dict[str, Any]:
    payload = grid_to_dict(grid)
    payload["vendor"] = vendor
    payload["labels"] = vendor_labels(grid, vendor)
    payload["counts"] = [dict(cell.to_dict(), count=total) for cell, total in count_colors(grid)]
    return payload


def create_app() -> Flask:
    configure_logging()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = SETTINGS.max_upload_bytes
    session = GridSession(SETTINGS.default_vendor)
    app.extensions["grid_session"] = session

    def palette() -> List[PaletteEntry]:
        return load_palette(SETTINGS.palette_path)

    def build_from_request() -> Tuple[Grid, str]:
        args = _params()
        size, style, policy, vendor = parse_grid_options(args)
        source = _image_source(args)
        token = session.begin()
        grid = build_grid_sync(source, palette(), size, style, policy)
        logger.info("Built %dx%d grid (style=%s, policy=%s)", size, size, style.value, policy.value)
        session.accept(token, grid)
        return grid, vendor

    @app.errorhandler(DecodeError)
    def handle_decode_error(exc: DecodeError):
        logger.warning("Image decode failed: %s", exc)
        return error_response(str(exc), 400)

    @app.errorhandler(SurfaceUnavailableError)
    def handle_surface_error(exc: SurfaceUnavailableError):
        logger.error("Sample surface unavailable: %s", exc, exc_info=exc)
        return error_response(str(exc), 500)

    @app.errorhandler(ValueError)
    def handle_value_error(exc: ValueError):
        return error_response(str(exc), 400)

    @app.errorhandler(IndexError)
    def handle_index_error(exc: IndexError):
        return error_response(str(exc), 404)

    @app.route("/grid", methods=["POST"])
    def create_grid():
        grid, vendor = build_from_request()
        return jsonify(_grid_payload(grid, vendor))

    @app.route("/grid.png", methods=["POST"])
    def create_grid_png():
        grid, vendor = build_from_request()
        cell_size = max(4, min(64, int(request.args.get("cell_size", 16))))
        return send_png(render_grid_image(grid, vendor, cell_size=cell_size))

    @app.route("/grid", methods=["GET"])
    def current_grid():
        grid = session.grid
        if grid is None:
            return error_response("No grid has been built yet", 404)
        return jsonify(_grid_payload(grid, session.vendor))

    @app.route("/grid", methods=["DELETE"])
    def reset_grid():
        session.reset()
        return jsonify(ok=True, vendor=session.vendor)

    @app.route("/grid/cells/<int:row>/<int:col>", methods=["GET"])
    def eyedrop_cell(row: int, col: int):
        if session.grid is None:
            return error_response("No grid has been built yet", 404)
        return jsonify(session.eyedrop(row, col).to_dict())

    @app.route("/grid/cells/<int:row>/<int:col>", methods=["PUT"])
    def paint_grid_cell(row: int, col: int):
        if session.grid is None:
            return error_response("No grid has been built yet", 404)
        hex_value = str(_params().get("hex", ""))
        cell = find_palette_cell(palette(), hex_value)
        if cell is None:
            return error_response(f"{hex_value!r} is not a palette color", 400)
        session.paint(row, col, cell)
        return jsonify(cell.to_dict())

    @app.route("/vendor", methods=["PUT"])
    def select_vendor():
        session.select_vendor(str(_params().get("vendor", "")))
        labels = session.labels() if session.grid is not None else None
        return jsonify(vendor=session.vendor, labels=labels)

    @app.route("/palette")
    def palette_view():
        style = FilterStyle(str(request.args.get("style", FilterStyle.NONE.value)).lower())
        entries = filter_palette(palette(), style)
        return jsonify(
            style=style.value,
            count=len(entries),
            colors=[{"hex": entry.hex, "rgb": list(entry.rgb), "codes": dict(entry.codes)} for entry in entries],
        )

    @app.route("/health")
    def health():
        return jsonify(ok=True, version=APP_VERSION, palette_size=len(palette()))

    @app.route("/settings", methods=["GET", "PATCH"])
    def settings_view():
        if request.method == "GET":
            return jsonify(asdict(SETTINGS))

        payload = _json_object()
        errors: dict[str, str] = {}
        pending: dict[str, object] = {}

        for field in fields(SETTINGS):
            if field.name not in payload:
                continue

            raw_value = payload[field.name]
            try:
                if field.type in (int, "int"):
                    coerced = int(raw_value)
                elif field.type in (float, "float"):
                    coerced = float(raw_value)
                else:
                    coerced = str(raw_value)
            except (TypeError, ValueError):
                errors[field.name] = f"Expected {getattr(field.type, '__name__', field.type)}"
                continue

            if field.name in ("filter_style", "scaling_policy"):
                coerced = str(coerced).lower()
            choices = _CHOICES.get(field.name)
            if choices is not None and coerced not in choices:
                errors[field.name] = f"Expected one of {', '.join(choices)}"
                continue

            if field.name == "palette_path":
                try:
                    load_palette(coerced)
                except (OSError, ValueError) as exc:
                    errors[field.name] = f"Cannot load palette: {exc}"
                    continue

            pending[field.name] = coerced

        bounds = {name: pending.get(name, getattr(SETTINGS, name)) for name in ("grid_min", "grid_size", "grid_max")}
        if not 1 <= bounds["grid_min"] <= bounds["grid_size"] <= bounds["grid_max"]:
            for name in bounds:
                if name in pending:
                    errors[name] = "Expected 1 <= grid_min <= grid_size <= grid_max"
                    del pending[name]

        for name, value in pending.items():
            setattr(SETTINGS, name, value)
        applied = pending

        status = 400 if errors else 200
        return (
            jsonify(updated=applied, errors=errors, settings=asdict(SETTINGS)),
            status,
        )

    @app.route("/")
    def index():
        return jsonify(
            version=APP_VERSION,
            vendors=list(VENDORS),
            styles=_CHOICES["filter_style"],
            policies=_CHOICES["scaling_policy"],
            endpoints={
                "POST /grid": "Build a grid from an 'image' upload or 'source' URL",
                "POST /grid.png": "Build a grid and return a labelled PNG preview",
                "GET /grid": "Current grid with labels for the selected vendor",
                "DELETE /grid": "Discard the current grid",
                "GET /grid/cells/<row>/<col>": "Eyedrop a cell",
                "PUT /grid/cells/<row>/<col>": "Paint a cell with a palette color",
                "PUT /vendor": "Select the vendor used for labels",
                "GET /palette": "Palette colors, optionally filtered by style",
                "GET /health": "Service health",
                "GET|PATCH /settings": "Read or update runtime settings",
            },
        )

    return app


# Expose a module-level Flask application for Gunicorn import paths like ``bead_grid.app:app``.
app = create_app()
application = app
