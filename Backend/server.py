import json
import logging

from flask import Blueprint, Flask, Response, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import MethodNotAllowed, NotFound, RequestEntityTooLarge

from auth.access_policy import PASSWORD_HEADER, authorize
from config import Config
from utils.errors import ApiError, InvalidPayloadError
from utils.file_ops import DocumentStore, parse
from utils.system_settings import normalize_settings

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__, url_prefix="/api")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def get_store() -> DocumentStore:
    return current_app.extensions["document_store"]


def check_access(settings):
    authorize(
        settings,
        request.headers.get(PASSWORD_HEADER),
        path=request.path,
        remote_addr=request.remote_addr,
    )


@api.route("/config", methods=["GET"])
def public_config():
    settings = normalize_settings(get_store().load())
    return jsonify(settings.public_view()), 200


@api.route("/database", methods=["GET"])
def get_database():
    store = get_store()
    # Serve the bytes exactly as stored so a save/fetch cycle is byte-identical.
    raw = store.read_bytes()
    check_access(normalize_settings(parse(raw)))
    return Response(raw, status=200, mimetype="application/json", headers=NO_CACHE_HEADERS)


@api.route("/save", methods=["POST"])
def save_database():
    store = get_store()
    check_access(normalize_settings(store.load()))

    body = request.get_data(cache=False)
    try:
        payload = json.loads(body)
    except ValueError as e:
        logger.warning("Invalid save request: %s", e)
        raise InvalidPayloadError(cause=e) from e
    if not isinstance(payload, dict):
        logger.warning("Invalid save request: top-level %s instead of an object", type(payload).__name__)
        raise InvalidPayloadError("Invalid DB structure")

    store.replace(body)
    logger.info("Database saved (%d bytes)", len(body))
    return jsonify({"success": True}), 200


def answer_preflight():
    if request.method == "OPTIONS":
        return Response(status=204)
    return None


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        if e.status_code >= 500:
            logger.error("%s: %s", e.message, e.cause)
        return jsonify({"error": e.message}), e.status_code

    # Unknown paths and known paths hit with the wrong method look the same to callers.
    @app.errorhandler(NotFound)
    @app.errorhandler(MethodNotAllowed)
    def handle_not_found(_):
        return jsonify({"error": "Not Found"}), 404

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(_):
        return jsonify({"error": "Payload too large"}), 413


def create_app(store=None, config_override=None):
    """Build the Flask app around ``store``, or a DocumentStore at DATABASE_FILE."""
    app = Flask(__name__, static_folder=None)
    app.config.update(Config.to_flask_dict())
    if config_override:
        app.config.update(config_override)

    if store is None:
        store = DocumentStore(app.config["DATABASE_FILE"])
    app.extensions["document_store"] = store

    CORS(
        app,
        resources={r"/*": {"origins": "*"}},
        send_wildcard=True,
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", PASSWORD_HEADER],
    )
    app.before_request(answer_preflight)
    app.register_blueprint(api)
    register_error_handlers(app)
    return app


def main():
    logging.basicConfig(level=Config.LOG_LEVEL, format=Config.LOG_FORMAT)
    app = create_app()
    store = app.extensions["document_store"]
    store.init_storage()
    logger.info("Database Server running on port %s", Config.PORT)
    logger.info("Local: http://localhost:%s", Config.PORT)
    logger.info("Database file: %s", store.path.resolve())
    app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)


if __name__ == "__main__":
    main()
