from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import employee_to_json, error_response, server_error
from ..core.exceptions import DomainError
from ..container import Container


def _draft_kwargs(data: dict) -> dict:
    return {
        "name": data.get("name"),
        "email": data.get("email"),
        "employee_id": data.get("employeeId"),
        "department": data.get("department"),
        "role": data.get("role"),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        data = request.get_json(silent=True) or {}
        try:
            token = container.admin_auth_service.login(data.get("username", ""), data.get("password", ""))
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "token": token})

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    def list_users():
        try:
            users = container.user_service.list_users()
        except Exception as e:
            return server_error(e, "User listing error")
        return jsonify({"success": True, "users": [employee_to_json(u) for u in users]})

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="users_get")
    def get_user(user_id: int):
        try:
            user = container.user_service.get_user(user_id)
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e, "User lookup error")
        return jsonify({"success": True, "user": employee_to_json(user)})

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    def create_user():
        data = request.get_json(silent=True) or {}
        try:
            user = container.user_service.create_user(**_draft_kwargs(data))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e, "User creation error")
        return jsonify({"success": True, "user": employee_to_json(user)}), 201

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="users_update")
    def update_user(user_id: int):
        data = request.get_json(silent=True) or {}
        try:
            user = container.user_service.update_user(user_id, **_draft_kwargs(data))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e, "User update error")
        return jsonify({"success": True, "user": employee_to_json(user)})

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="users_delete")
    def delete_user(user_id: int):
        try:
            container.user_service.delete_user(user_id)
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e, "User deletion error")
        return jsonify({"success": True, "message": "User deleted"})

    @app.route("/api/users/register-face", methods=["POST"], endpoint="users_register_face")
    def register_face():
        data = request.get_json(silent=True) or {}
        try:
            ack = container.user_service.register_face(data.get("userId"), data.get("image"))
        except DomainError as e:
            return error_response(e)
        except Exception as e:
            return server_error(e, "Face registration error")
        return jsonify(ack.to_dict())
