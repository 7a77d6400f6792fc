"""
project: Labyrinth
module: models.py

Database models.

Only runtime-tunable configuration is persisted; mazes themselves live in
memory with the room that owns them.
"""

from labyrinth import db


class GameConfig(db.Model):
    """Key/value style game configuration storage.

    Values are persisted as JSON-serializable text so they can be adjusted
    without code changes.

    Example rows:
        key='maze_defaults', value='{"width":30,"height":30,"shift_interval":45}'
    """

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(80), unique=True, nullable=False)
    value = db.Column(db.Text, nullable=False)

    @staticmethod
    def get(key: str):
        row = GameConfig.query.filter_by(key=key).first()
        return row.value if row else None

    @staticmethod
    def set(key: str, value: str):
        row = GameConfig.query.filter_by(key=key).first()
        if not row:
            row = GameConfig(key=key, value=value)
            db.session.add(row)
        else:
            row.value = value
        db.session.commit()
