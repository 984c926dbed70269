"""This module defines Quart request handlers which implement the REST API.

    GET     /apps/<app_id>     fetch an App
    POST    /apps              create an App,  label and description required
    PUT     /apps/<app_id>     replace an App,  label and description required
    PATCH   /apps/<app_id>     change only the fields sent
    DELETE  /apps/<app_id>     remove an App,  succeeds for unknown ids too

Bodies are JSON or XML in both directions,  errors are plain text.
"""
import os
import functools

from quart import request, jsonify, Response

from appstore.app import app
from appstore.main import init_store
from appstore.codec import negotiate, decode_request, encode_app
from appstore.errors import AppStoreError
from appstore.docs import build_spec

# -------------------------------------------------------------------------------------


def logged(handler):
    """Log unexpected exceptions raised by `handler` before Quart turns them
    into a 500.  AppStoreErrors are expected and left to handle_app_store_error.
    """

    @functools.wraps(handler)
    async def wrapper(*args, **keys):
        try:
            return await handler(*args, **keys)
        except AppStoreError:
            raise
        except Exception as e:
            init_store(reinit=False).log.exception(
                e, f"APPSTORE Exception in {handler.__name__}:", e
            )
            raise

    return wrapper


def app_response(found, status=200, mimetype=None):
    mimetype = mimetype or negotiate(request.accept_mimetypes)
    return Response(encode_app(found, mimetype), status=status, mimetype=mimetype)


@app.errorhandler(AppStoreError)
async def handle_app_store_error(error):
    init_store(reinit=False).log.warning(
        f"{request.method} {request.path} failed {error.status}: {error.message}"
    )
    return Response(error.message, status=error.status, mimetype="text/plain")


# -------------------------------------------------------------------------------------


@app.route("/check-alive", methods=["GET"])
async def check_alive():
    api = init_store(reinit=False)
    api.log.info(f"APPSTORE is alive holding {api.count()} apps.")
    return jsonify("ok")


@app.route("/apidocs.json", methods=["GET"])
async def api_docs():
    return jsonify(build_spec(server_url=request.host_url))


@app.route("/apps/<app_id>", methods=["GET"])
@logged
async def find_app(app_id):
    mimetype = negotiate(request.accept_mimetypes)
    found = init_store(reinit=False).get(app_id)
    return app_response(found, mimetype=mimetype)


@app.route("/apps", methods=["POST"])
@logged
async def create_app():
    mimetype = negotiate(request.accept_mimetypes)
    payload = decode_request(await request.get_data(), request.mimetype)
    created = init_store(reinit=False).create(payload)
    return app_response(created, status=201, mimetype=mimetype)


@app.route("/apps/<app_id>", methods=["PUT"])
@logged
async def update_app(app_id):
    return await _update(app_id, strict=True)


@app.route("/apps/<app_id>", methods=["PATCH"])
@logged
async def patch_app(app_id):
    return await _update(app_id, strict=False)


async def _update(app_id, strict):
    mimetype = negotiate(request.accept_mimetypes)
    api = init_store(reinit=False)
    api.get(app_id)  # unknown ids are 404 even when the body is malformed
    payload = decode_request(await request.get_data(), request.mimetype)
    updated = api.update(app_id, payload, strict=strict)
    return app_response(updated, mimetype=mimetype)


@app.route("/apps/<app_id>", methods=["DELETE"])
@logged
async def remove_app(app_id):
    init_store(reinit=False).delete(app_id)
    return "", 200


if __name__ == "__main__":
    app.run(
        host=os.environ.get("APPSTORE_HOST", "127.0.0.1"),
        port=int(os.environ.get("APPSTORE_PORT", "8080")),
        debug=bool(os.environ.get("DEBUG_QUART", False)),
    )
