from flask import Flask, render_template, request, jsonify, session
from dotenv import load_dotenv
import logging
import os
import uuid
from collections import OrderedDict
from pathlib import Path

from editor.compose import PLACEHOLDERS, compose_problem_text
from editor.keypad import keypad_layout
from intelligence.client import InferenceClient, create_genai_client
from models.problem import ProblemInput, ProblemMode
from session.controller import SessionController, SessionError


# -------------------------------------------------
# Setup
# -------------------------------------------------

load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parent

DEFAULT_MAX_SESSIONS = 1000


def create_app(inference_client=None, max_sessions=None):
    """
    Build the web app around one inference client.
    Without an explicit client, a Gemini client is created from the environment.
    """
    if inference_client is None:
        inference_client = InferenceClient(create_genai_client())
    if max_sessions is None:
        max_sessions = int(os.getenv("MAX_SESSIONS", DEFAULT_MAX_SESSIONS))

    app = Flask(
        __name__,
        template_folder=str(ROOT_DIR / "templates"),
    )
    app.secret_key = os.getenv("FLASK_SECRET_KEY", "dev-secret")

    # session id -> SessionController, in-process only.
    # Least recently used sessions are evicted past max_sessions.
    controllers = OrderedDict()

    # -------------------------------------------------
    # Helpers: session controllers
    # -------------------------------------------------

    def get_controller():
        if "session_id" not in session:
            session["session_id"] = str(uuid.uuid4())

        sid = session["session_id"]
        if sid in controllers:
            controllers.move_to_end(sid)
            return controllers[sid]

        controllers[sid] = SessionController(inference_client)
        while len(controllers) > max_sessions:
            evicted, _ = controllers.popitem(last=False)
            logger.info(f"Evicted idle session {evicted}")
        return controllers[sid]

    def discard_controller():
        sid = session.pop("session_id", None)
        if sid:
            controllers.pop(sid, None)

    def payload():
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def string_field(data, key):
        value = data.get(key)
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError(f"'{key}' must be a string")
        return value

    # -------------------------------------------------
    # Routes
    # -------------------------------------------------

    @app.route("/")
    def index():
        return render_template("index.html")

    @app.route("/api/modes", methods=["GET"])
    def get_modes():
        return jsonify([
            {"mode": m.name, "label": m.label, "placeholder": PLACEHOLDERS[m]}
            for m in ProblemMode
        ])

    @app.route("/api/keypad", methods=["GET"])
    def get_keypad():
        return jsonify(keypad_layout())

    @app.route("/api/mode", methods=["POST"])
    def select_mode():
        try:
            mode = ProblemMode.parse(payload().get("mode"))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        ctrl = get_controller()
        ctrl.select_mode(mode)
        return jsonify(ctrl.snapshot())

    @app.route("/api/state", methods=["GET"])
    def get_state():
        return jsonify(get_controller().snapshot())

    @app.route("/api/solve", methods=["POST"])
    def solve():
        ctrl = get_controller()
        if ctrl.mode is None:
            return jsonify({"error": "Select a mode first"}), 400

        data = payload()
        try:
            expression = string_field(data, "text").strip()
            limit_target = string_field(data, "limit_target")
            image = string_field(data, "image") or None
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        # the limit wrapper alone is not a problem
        if not expression and not image:
            return jsonify(ctrl.snapshot())

        text = compose_problem_text(ctrl.mode, expression, limit_target)
        try:
            ctrl.submit_problem(ProblemInput(text=text, image=image))
        except SessionError as e:
            return jsonify({"error": str(e)}), 400

        return jsonify(ctrl.snapshot())

    @app.route("/api/chat", methods=["POST"])
    def chat():
        ctrl = get_controller()
        try:
            message = string_field(payload(), "message").strip()
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        if message:
            ctrl.send_follow_up(message)
        return jsonify(ctrl.snapshot())

    @app.route("/api/reset", methods=["POST"])
    def reset():
        ctrl = get_controller()
        ctrl.reset()
        return jsonify(ctrl.snapshot())

    @app.route("/api/back", methods=["POST"])
    def go_back():
        ctrl = get_controller()
        ctrl.go_back()
        discard_controller()
        return jsonify({"status": "ok"})

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
