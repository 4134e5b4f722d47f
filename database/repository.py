"""SQLAlchemy-backed match repository used by the Flask app."""

import logging

from engine.exceptions import MatchNotFoundError
from engine.repository import MatchRepository
from database.models import Match as DBMatch


class SqlMatchRepository(MatchRepository):

    def __init__(self, db, logger=None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def load(self, match_id):
        row = self.db.session.get(DBMatch, match_id)
        if row is None:
            raise MatchNotFoundError(match_id)
        return row.to_domain()

    def save(self, match):
        row = self.db.session.get(DBMatch, match.id)
        if row is None:
            row = DBMatch(id=match.id)
            self.db.session.add(row)
        row.update_from(match)
        try:
            self.db.session.commit()
        except Exception:
            self.db.session.rollback()
            self.logger.error(f"Failed to save match {match.id}", exc_info=True)
            raise

    def list_all(self):
        rows = DBMatch.query.order_by(DBMatch.created_at).all()
        return [row.to_domain() for row in rows]
