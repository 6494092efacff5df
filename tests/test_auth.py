import base64
import hashlib

import pytest

from finance_tracker.services import Services
from finance_tracker.services.auth import hash_password, verify_password
from finance_tracker.viewmodels import RegistrationInput


def test_sha256_hash_is_deterministic_base64_digest():
    expected = base64.b64encode(hashlib.sha256(b'secret123').digest()).decode('ascii')
    assert hash_password('secret123') == expected
    assert hash_password('secret123') == hash_password('secret123')
    assert verify_password('secret123', expected)
    assert not verify_password('secret124', expected)


def test_werkzeug_scheme_is_salted():
    first = hash_password('secret123', 'werkzeug')
    second = hash_password('secret123', 'werkzeug')
    assert first != second
    assert verify_password('secret123', first, 'werkzeug')
    assert not verify_password('nope', first, 'werkzeug')


def test_unknown_scheme_is_rejected():
    with pytest.raises(ValueError):
        hash_password('secret123', 'md5')


def test_authenticate(services, make_user):
    user_id = make_user('alice', password='secret123')

    user = services.auth.authenticate('alice', 'secret123')
    assert user is not None and user.id == user_id
    assert services.auth.authenticate('alice', 'wrong-password') is None
    assert services.auth.authenticate('mallory', 'secret123') is None


def test_stored_hash_is_not_the_password(services, make_user):
    make_user('alice', password='secret123')
    user = services.auth.get_user_by_username('alice')
    assert user.password_hash == hash_password('secret123')
    assert user.created_at is not None


def test_register_rejects_existing_username_or_email(services, make_user):
    make_user('alice', email='alice@example.com')

    assert services.auth.user_exists('alice', 'other@example.com')
    assert services.auth.user_exists('someone', 'alice@example.com')
    assert not services.auth.register(RegistrationInput('alice', 'new@example.com', 'secret123'))
    assert not services.auth.register(RegistrationInput('alice2', 'alice@example.com', 'secret123'))


def test_username_comparison_is_case_sensitive(services, make_user):
    make_user('alice')
    assert services.auth.register(RegistrationInput('Alice', 'Alice@example.com', 'secret123'))
    assert services.auth.authenticate('ALICE', 'secret123') is None


def test_werkzeug_scheme_round_trip(ctx):
    from finance_tracker.extensions import db

    services = Services(db.session, password_scheme='werkzeug')
    assert services.auth.register(RegistrationInput('carol', 'carol@example.com', 'secret123'))
    assert services.auth.authenticate('carol', 'secret123') is not None
    assert services.auth.authenticate('carol', 'secret') is None
