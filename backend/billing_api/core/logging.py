import logging
import sys
import json
from datetime import datetime, timezone

_SERVICE_FIELDS: dict = {}


class JSONFormatter(logging.Formatter):
    """構造化JSONログフォーマッター

    logger.info("...", extra={"extra_data": {...}}) で渡した値は "data" に出力する。
    """

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_SERVICE_FIELDS,
        }
        if hasattr(record, "extra_data"):
            log_entry["data"] = record.extra_data
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging(debug: bool = False, service: str = "", env: str = ""):
    """ロギング設定を初期化"""
    level = logging.DEBUG if debug else logging.INFO

    _SERVICE_FIELDS.clear()
    if service:
        _SERVICE_FIELDS["service"] = service
    if env:
        _SERVICE_FIELDS["env"] = env

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # SQLAlchemy と requests(urllib3) の過剰ログを抑制
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """名前付きロガーを取得"""
    return logging.getLogger(name)
