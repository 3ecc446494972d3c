from flask import Blueprint, jsonify, request

from economy.economy_manager import require_int
from economy.errors import NotFoundError, ValidationError
from routes import require_admin, services

bp = Blueprint("items", __name__)


def _item_fields(body):
    """Pull name and stats out of a create/update body."""
    if not isinstance(body, dict):
        raise ValidationError("Send an item object.")
    name = body.get("item_name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("'item_name' is required.")
    stat = body.get("item_stat") or {}
    if not isinstance(stat, dict):
        raise ValidationError("'item_stat' must be an object.")
    health = require_int(stat.get("health", 0), "item_stat.health")
    power = require_int(stat.get("power", 0), "item_stat.power")
    return name.strip(), health, power


@bp.route("/item", methods=["POST"])
@require_admin
def create_item():
    body = request.get_json(silent=True)
    name, health, power = _item_fields(body)
    item_code = require_int(body.get("item_code"), "item_code")
    price = require_int(body.get("item_price"), "item_price")
    item_id = services().catalog.create_item(item_code, name, health, power, price)
    return jsonify({"id": item_id}), 201


@bp.route("/item/<int:item_code>", methods=["POST"])
@require_admin
def update_item(item_code):
    name, health, power = _item_fields(request.get_json(silent=True))
    item = services().catalog.update_item(item_code, name, health, power)
    return jsonify({"message": "Item updated.", "item": item.to_detail()})


@bp.route("/items", methods=["GET"])
def list_items():
    return jsonify([item.to_summary() for item in services().catalog.list_items()])


@bp.route("/item/<int:item_code>", methods=["GET"])
def item_detail(item_code):
    item = services().catalog.get_item(item_code)
    if item is None:
        raise NotFoundError(f"Item code {item_code} was not found.")
    return jsonify(item.to_detail())
