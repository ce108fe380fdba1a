from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from news_analytics import AnalyticsConfig, NewsAgent
from news_analytics.errors import InvalidInputError, NotFoundError, UpstreamError


def _threshold_arg(value: object) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidInputError("`threshold` must be a number") from None


def _int_arg(value: object, name: str, default: Optional[int]) -> Optional[int]:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"`{name}` must be an integer") from None


def create_app(agent: Optional[NewsAgent] = None) -> Flask:
    app = Flask(__name__)
    news_agent = agent or NewsAgent(AnalyticsConfig.from_env())
    app.extensions["news_agent"] = news_agent

    @app.errorhandler(NotFoundError)
    def _not_found(exc: NotFoundError):
        return jsonify({"error": str(exc)}), 404

    @app.errorhandler(ValueError)
    def _invalid(exc: ValueError):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(UpstreamError)
    def _upstream(exc: UpstreamError):
        return jsonify({"error": str(exc)}), 502

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):  # pragma: no cover - runtime guard
        if isinstance(exc, HTTPException):
            return exc
        app.logger.exception("Uncaught exception when handling %s", request.path)
        return jsonify({"error": "Unexpected server error", "detail": str(exc)}), 500

    @app.get("/health")
    def healthcheck():
        return {"status": "ok"}

    @app.post("/news")
    def fetch_news():
        payload = request.get_json(silent=True) or {}
        records = news_agent.fetch_news(
            source=payload.get("source"),
            category=payload.get("category"),
            keyword=payload.get("keyword"),
            limit=_int_arg(payload.get("limit"), "limit", None),
        )
        return jsonify([record.to_dict() for record in records])

    @app.get("/news/recent")
    def recent_news():
        return jsonify([record.to_dict() for record in news_agent.recent_news()])

    @app.get("/sources")
    def sources():
        return jsonify(news_agent.sources())

    @app.get("/news/<news_id>")
    def get_news(news_id: str):
        return jsonify(news_agent.get_record(news_id).to_dict())

    @app.post("/summarize")
    def summarize():
        payload = request.get_json(silent=True) or {}
        result = news_agent.summarize_news(
            text=payload.get("text"),
            news_id=payload.get("news_id"),
            sentence_count=_int_arg(payload.get("sentence_count"), "sentence_count", 3),
            extract_keywords=bool(payload.get("extract_keywords", True)),
        )
        return jsonify(result.to_dict())

    @app.post("/sentiment")
    def sentiment():
        payload = request.get_json(silent=True) or {}
        texts = payload.get("texts")
        if texts is not None:
            if not isinstance(texts, list):
                raise InvalidInputError("`texts` must be a list")
            return jsonify(news_agent.sentiment_batch(texts).to_dict())
        if "title" in payload:
            return jsonify(news_agent.scorer.score_record(payload.get("title"), payload.get("content")).to_dict())
        if not payload.get("text"):
            raise InvalidInputError("`text`, `title` or `texts` is required")
        return jsonify(news_agent.sentiment(payload["text"]).to_dict())

    @app.get("/news/<news_id>/sentiment")
    def news_sentiment(news_id: str):
        return jsonify(news_agent.news_sentiment(news_id).to_dict())

    @app.post("/duplicates")
    def duplicates():
        payload = request.get_json(silent=True) or {}
        result = news_agent.find_duplicates(_threshold_arg(payload.get("threshold")))
        return jsonify(result.to_dict())

    @app.post("/dedupe")
    def dedupe():
        payload = request.get_json(silent=True) or {}
        records = news_agent.dedupe_news(_threshold_arg(payload.get("threshold")))
        return jsonify([record.to_dict() for record in records])

    @app.get("/news/<news_id>/similar")
    def similar(news_id: str):
        group = news_agent.similar_news(news_id, _threshold_arg(request.args.get("threshold")))
        return jsonify(group.to_dict())

    @app.get("/trends")
    def trends():
        hours = request.args.get("hours", type=float, default=24.0)
        top_words = _int_arg(request.args.get("top_words"), "top_words", 10)
        return jsonify(news_agent.analyze_trends(hours=hours, top_words=top_words))

    @app.get("/cache/stats")
    def cache_stats():
        return jsonify(news_agent.cache_stats().to_dict())

    @app.post("/cache/maintain")
    def cache_maintain():
        return jsonify(news_agent.maintain())

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    _agent = NewsAgent(AnalyticsConfig.from_env())
    _agent.start()
    try:
        create_app(_agent).run(debug=False, host="0.0.0.0", port=8008)
    finally:
        _agent.close()
