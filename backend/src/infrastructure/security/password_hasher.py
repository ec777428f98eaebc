"""
Password Hasher Implementation
bcrypt with a per-password salt
"""
import bcrypt

from application.services.auth.interfaces import IPasswordHasher


class BcryptPasswordHasher(IPasswordHasher):
    """bcrypt password hasher"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        # bcrypt only looks at the first 72 bytes
        hashed = bcrypt.hashpw(password.encode("utf-8")[:72], bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8")[:72], hashed_password.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False
