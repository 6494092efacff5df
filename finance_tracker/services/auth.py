import base64
import hashlib
import hmac
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from ..models import User

logger = logging.getLogger(__name__)

SHA256 = 'sha256'
WERKZEUG = 'werkzeug'


def hash_password(password, scheme=SHA256):
    if scheme == WERKZEUG:
        return generate_password_hash(password)
    if scheme != SHA256:
        raise ValueError(f'Unknown password hash scheme: {scheme}')
    digest = hashlib.sha256(password.encode('utf-8')).digest()
    return base64.b64encode(digest).decode('ascii')


def verify_password(password, password_hash, scheme=SHA256):
    if scheme == WERKZEUG:
        return check_password_hash(password_hash, password)
    return hmac.compare_digest(hash_password(password, scheme), password_hash)


class AuthService:
    def __init__(self, uow, scheme=SHA256):
        self.uow = uow
        self.scheme = scheme

    def authenticate(self, username, password):
        """Return the user when the credentials match, otherwise None.

        Unknown usernames and wrong passwords are indistinguishable.
        """
        user = self.get_user_by_username(username)
        if user is None:
            return None
        if not verify_password(password, user.password_hash, self.scheme):
            return None
        return user

    def register(self, data):
        try:
            if self.user_exists(data.username, data.email):
                return False

            user = User(
                username=data.username,
                email=data.email,
                password_hash=hash_password(data.password, self.scheme),
                created_at=datetime.now(),
            )
            self.uow.users.add(user)
            self.uow.complete()
            logger.info('Registered user %s', data.username)
            return True
        except SQLAlchemyError:
            self.uow.rollback()
            logger.exception('Registration failed for %s', data.username)
            return False

    def get_user_by_id(self, user_id):
        return self.uow.users.get_by_id(user_id)

    def get_user_by_username(self, username):
        return self.uow.users.first_or_none(username=username)

    def user_exists(self, username, email):
        return self.uow.users.find_by_username_or_email(username, email) is not None
