"""Tests for covenant.either — Ok(target) / Err(violations) results.

Coverage:
    - valid target returns Ok holding the same object
    - invalid target returns Err holding the violations
    - match-statement destructuring and match(ok=, err=)
    - None target raises through both entry points
"""

from __future__ import annotations

import pytest

from covenant import ConstraintViolations, ContractViolationError, Err, Ok, Validator
from conftest import Address, User


@pytest.fixture
def valid_user() -> User:
    return User(name="alice", email="alice@example.com", age=30, address=Address("Tokyo", "1000001"))


class TestEither:
    def test_ok_is_same_object(self, user_validator: Validator, valid_user: User) -> None:
        result = user_validator.either().validate(valid_user)
        assert result.is_ok()
        assert result.unwrap() is valid_user

    def test_err_holds_violations(self, user_validator: Validator) -> None:
        result = user_validator.validate_either(User(name="", email="alice@example.com", age=30))
        assert result.is_err()
        violations = result.unwrap_err()
        assert isinstance(violations, ConstraintViolations)
        assert [v.name for v in violations] == ["name"]

    def test_match_statement(self, user_validator: Validator, valid_user: User) -> None:
        match user_validator.validate_either(valid_user):
            case Ok(user):
                assert user is valid_user
            case Err(_):
                pytest.fail("expected Ok")

    def test_fold(self, user_validator: Validator) -> None:
        result = user_validator.validate_either(User(name="", email="", age=None))
        summary = result.match(ok=lambda u: "ok", err=lambda vs: ",".join(v.name for v in vs))
        assert summary == "name,email,age"

    def test_locale_and_group_forwarded(self) -> None:
        validator = (
            Validator.builder()
            .constraint_on_group("CREATE", "name", lambda u: u.name, lambda c: c.not_null())
            .build()
        )
        assert validator.validate_either(User()).is_ok()
        result = validator.validate_either(User(), locale="ja", group="CREATE")
        assert result.unwrap_err().messages() == ['"name"は必須です']

    def test_none_target_raises(self, user_validator: Validator) -> None:
        with pytest.raises(ContractViolationError):
            user_validator.either().validate(None)
        with pytest.raises(ContractViolationError):
            user_validator.validate_either(None)
