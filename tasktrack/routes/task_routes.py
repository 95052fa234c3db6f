from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from tasktrack.repositories.task_repository import TaskRepository
from tasktrack.schemas import parse_payload
from tasktrack.schemas.task_schemas import TaskCreate, TaskUpdate
from tasktrack.services.task_service import TaskService
from tasktrack.utils.db import get_db
from tasktrack.utils.rate_limit import rate_limited, user_or_ip


tasks_bp = Blueprint("tasks", __name__)


def get_task_service() -> TaskService:
    return TaskService(TaskRepository(get_db()))


@tasks_bp.get("")
@jwt_required()
@rate_limited("api", key_func=user_or_ip)
def list_tasks():
    user_id = get_jwt_identity()
    tasks = get_task_service().list_tasks(user_id)
    return jsonify([task.to_dict() for task in tasks]), 200


@tasks_bp.post("")
@jwt_required()
@rate_limited("api", key_func=user_or_ip)
def create_task():
    user_id = get_jwt_identity()
    data = parse_payload(TaskCreate, request.get_json(silent=True))
    task = get_task_service().create_task(user_id, data)
    return jsonify(task.to_dict()), 201


@tasks_bp.get("/<task_id>")
@jwt_required()
@rate_limited("api", key_func=user_or_ip)
def show_task(task_id):
    user_id = get_jwt_identity()
    task = get_task_service().get_task(user_id, task_id)
    return jsonify(task.to_dict()), 200


@tasks_bp.put("/<task_id>")
@jwt_required()
@rate_limited("api", key_func=user_or_ip)
def update_task(task_id):
    user_id = get_jwt_identity()
    service = get_task_service()
    # ownership first, so a foreign task is a 404 even with a bad payload
    service.get_task(user_id, task_id)
    data = parse_payload(TaskUpdate, request.get_json(silent=True))
    task = service.update_task(user_id, task_id, data)
    return jsonify(task.to_dict()), 200


@tasks_bp.delete("/<task_id>")
@jwt_required()
@rate_limited("api", key_func=user_or_ip)
def delete_task(task_id):
    user_id = get_jwt_identity()
    get_task_service().delete_task(user_id, task_id)
    return "", 204
