from flask import Blueprint, jsonify

core = Blueprint("core", __name__)


@core.get("/")
def root():
    return jsonify({"service": "lead-intake", "ok": True})


@core.get("/__ping")
def ping():
    return {"ok": True}, 200
