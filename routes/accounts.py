from flask import Blueprint, jsonify, request, session

from routes import services

bp = Blueprint("accounts", __name__)


@bp.route("/sign-up", methods=["POST"])
def sign_up():
    body = request.get_json(silent=True) or {}
    account = services().accounts.sign_up(
        body.get("account"),
        body.get("password"),
        body.get("passwordConfirm"),
        body.get("name", ""),
    )
    payload = account.to_dict()
    payload["message"] = "Sign-up complete."
    return jsonify(payload), 201


@bp.route("/sign-in", methods=["POST"])
def sign_in():
    body = request.get_json(silent=True) or {}
    account = services().accounts.authenticate(body.get("account"), body.get("password"))
    session.clear()
    session["user_id"] = account.id
    session["username"] = account.account
    session.permanent = True
    return jsonify({"message": "Signed in."})


@bp.route("/sign-out", methods=["POST"])
def sign_out():
    session.clear()
    return jsonify({"message": "You have signed out."})
