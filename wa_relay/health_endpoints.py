"""
Health endpoints for container liveness checks
"""
from flask import Blueprint, jsonify
from datetime import datetime
import time

APP_START_TIME = time.time()

health_bp = Blueprint('health', __name__)


@health_bp.route('/api/health', methods=['GET'])
def api_health():
    """API health check endpoint"""
    return jsonify({
        "status": "ok",
        "service": "wa-relay",
        "uptime_seconds": int(time.time() - APP_START_TIME),
        "timestamp": datetime.now().isoformat()
    }), 200


@health_bp.route('/healthz', methods=['GET'])
def healthz_endpoint():
    """Basic liveness check"""
    return "ok", 200
