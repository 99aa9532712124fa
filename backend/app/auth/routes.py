from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity, jwt_required

from app.auth.services import AuthService
from app.errors import Unauthenticated
from app.utils.validators import json_body

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    identity, token = AuthService.sign_up(json_body())
    return jsonify({"access_token": token, "user": identity.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    identity, token = AuthService.sign_in(json_body())
    return jsonify({"access_token": token, "user": identity.to_dict()})


@auth_bp.route("/logout", methods=["POST"])
@jwt_required()
def logout():
    AuthService.sign_out(get_jwt())
    return jsonify({"message": "Signed out"})


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    identity = AuthService.current_user(get_jwt_identity())
    if identity is None:
        raise Unauthenticated("User not found")
    return jsonify(identity.to_dict())
