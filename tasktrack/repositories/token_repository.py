from datetime import datetime


class TokenRepository:
    """Issued access tokens, one record per JWT ``jti``.

    A token is only honoured while its record exists, so deleting a record
    revokes exactly that token.
    """

    def __init__(self, db):
        self.collection = db.access_tokens

    def add(self, jti: str, user_id: str, created_at: datetime) -> None:
        self.collection.insert_one({"jti": jti, "user_id": user_id, "created_at": created_at})

    def is_active(self, jti: str) -> bool:
        return self.collection.find_one({"jti": jti}, {"_id": 1}) is not None

    def revoke(self, jti: str) -> bool:
        return self.collection.delete_one({"jti": jti}).deleted_count == 1
