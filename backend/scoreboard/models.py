from datetime import datetime, timezone

from scoreboard import db


def _utcnow():
    return datetime.now(timezone.utc)


class KeyValue(db.Model):
    __tablename__ = 'kv_store'
    key = db.Column(db.String(128), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
