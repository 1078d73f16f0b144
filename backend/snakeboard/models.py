from snakeboard import db
import json
import time


class StoredValue(db.Model):
    """One JSON document per key; the SQL stand-in for the remote KV store."""
    __tablename__ = 'stored_value'
    key = db.Column(db.String(128), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.Float, nullable=False, default=time.time)

    def load(self):
        return json.loads(self.value)

