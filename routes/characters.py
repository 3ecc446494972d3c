from flask import Blueprint, jsonify, request

from economy.economy_manager import parse_item_code, parse_purchase_request, parse_sell_request
from routes import current_account_id, require_auth, services

bp = Blueprint("characters", __name__)


# --- Character lifecycle ---

@bp.route("/character", methods=["POST"])
@require_auth
def create_character():
    body = request.get_json(silent=True) or {}
    character = services().characters.create_character(current_account_id(), body.get("name"))
    return jsonify(character.to_dict()), 201


@bp.route("/characters", methods=["GET"])
@require_auth
def list_characters():
    characters = services().characters.list_characters(current_account_id())
    return jsonify([c.to_dict() for c in characters])


@bp.route("/character/<int:character_id>", methods=["GET"])
@require_auth
def character_detail(character_id):
    return jsonify(services().characters.character_detail(character_id, current_account_id()))


@bp.route("/character/<int:character_id>", methods=["DELETE"])
@require_auth
def delete_character(character_id):
    services().characters.delete_character(character_id, current_account_id())
    return jsonify({"message": "The character was deleted."})


# --- Economy ---

@bp.route("/character/<int:character_id>/purchase", methods=["POST"])
@require_auth
def purchase(character_id):
    lines = parse_purchase_request(request.get_json(silent=True))
    money = services().economy.purchase(character_id, current_account_id(), lines)
    return jsonify({"message": "Items purchased.", "money": money})


@bp.route("/character/<int:character_id>/sell", methods=["POST"])
@require_auth
def sell(character_id):
    item_codes = parse_sell_request(request.get_json(silent=True))
    money = services().economy.sell(character_id, current_account_id(), item_codes)
    return jsonify({"message": "Items sold.", "money": money})


@bp.route("/character/<int:character_id>/equip", methods=["POST"])
@require_auth
def equip(character_id):
    item_code = parse_item_code(request.get_json(silent=True))
    services().economy.equip(character_id, current_account_id(), item_code)
    return jsonify({"message": "Item equipped."})


@bp.route("/character/<int:character_id>/unequip", methods=["POST"])
@require_auth
def unequip(character_id):
    item_code = parse_item_code(request.get_json(silent=True))
    services().economy.unequip(character_id, current_account_id(), item_code)
    return jsonify({"message": "Item unequipped."})


@bp.route("/character/<int:character_id>/earn-money", methods=["POST"])
@require_auth
def earn_money(character_id):
    money = services().economy.earn_money(character_id, current_account_id())
    return jsonify({"message": "Money earned.", "money": money})


@bp.route("/character/<int:character_id>/inventory", methods=["GET"])
@require_auth
def inventory(character_id):
    return jsonify(services().economy.inventory_listing(character_id, current_account_id()))


@bp.route("/character/<int:character_id>/equipped", methods=["GET"])
def equipped(character_id):
    return jsonify(services().economy.equipped_listing(character_id))
