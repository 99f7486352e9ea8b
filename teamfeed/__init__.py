import logging

from flask import Flask, Response, jsonify, redirect, request, url_for

from .context import AppContext
from .exceptions import AuthenticationRequiredError, TeamFeedError
from .feed_service import FeedRequest

logger = logging.getLogger(__name__)


def create_app(context: AppContext | None = None):
    app = Flask(__name__)
    ctx = context or AppContext()
    app.extensions["teamfeed"] = ctx

    @app.errorhandler(TeamFeedError)
    def handle_feed_error(error: TeamFeedError):
        logger.warning(f"{request.method} {request.path} failed: {error}")
        if request.path.startswith("/api/"):
            return jsonify({"error": str(error)}), error.status_code
        return Response(
            str(error),
            status=error.status_code,
            content_type="text/plain; charset=utf-8",
        )

    def serve_feed(token: str, force_text: bool):
        feed_request = FeedRequest(
            token=token,
            if_modified_since=request.headers.get("If-Modified-Since"),
            if_none_match=request.headers.get("If-None-Match"),
            cache_off=request.args.get("cache") == "off",
            refresh=request.args.get("refresh") == "true",
            as_text=force_text or request.args.get("format") == "text",
        )
        result = ctx.feed_service.serve(feed_request)
        return Response(result.body, status=result.status, headers=result.headers)

    @app.route("/<token>.ics", methods=["GET"])
    def calendar_feed(token):
        """Serve a calendar feed as a downloadable attachment."""
        return serve_feed(token, force_text=False)

    @app.route("/<token>.txt", methods=["GET"])
    def calendar_text(token):
        """Serve a calendar feed inline as plain text."""
        return serve_feed(token, force_text=True)

    def require_authentication():
        if not ctx.oauth.is_authenticated():
            raise AuthenticationRequiredError("Not authenticated")

    @app.route("/api/teams", methods=["GET"])
    def api_teams():
        require_authentication()
        base_url = request.url_root.rstrip("/")
        return jsonify(ctx.calendar_service.list_calendars(base_url))

    @app.route("/api/team-settings", methods=["GET", "POST"])
    def api_team_settings():
        require_authentication()

        if request.method == "GET":
            team_id = request.args.get("teamId")
            if not team_id:
                return jsonify({"error": "Missing teamId"}), 400
            preferences = ctx.calendar_service.get_settings(team_id)
            return jsonify(preferences.model_dump(by_alias=True))

        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}
        team_id = payload.get("teamId")
        if not team_id:
            return jsonify({"error": "Missing teamId"}), 400

        custom_name = payload.get("customName")
        remove_opponent_names = None
        if "removeOpponentNames" in payload:
            remove_opponent_names = bool(payload["removeOpponentNames"])

        ctx.calendar_service.update_settings(
            str(team_id),
            str(custom_name).strip() if custom_name else None,
            remove_opponent_names,
        )
        return jsonify({"success": True})

    @app.route("/", methods=["GET"])
    def index():
        if ctx.oauth.is_authenticated():
            return redirect(url_for("api_teams"))
        return redirect(ctx.oauth.authorization_url(url_for("auth_callback", _external=True)))

    @app.route("/auth-callback", methods=["GET"])
    def auth_callback():
        code = request.args.get("code")
        if not code:
            return ("Missing authorization code", 400)

        try:
            ctx.oauth.exchange_code(code, url_for("auth_callback", _external=True))
        except AuthenticationRequiredError as e:
            logger.error(f"Token exchange failed: {e}")
            return ("Authentication failed", 500)

        try:
            user = ctx.client.get_me()
        except TeamFeedError as e:
            logger.warning(f"Could not fetch user info after authorization: {e}")
            user = None
        if user:
            ctx.oauth.store_user_info(user)

        logger.info("OAuth successful, redirecting")
        return redirect(url_for("index"))

    return app
