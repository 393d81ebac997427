"""
Utilitários de segurança: hash de senha, verificação de credenciais e JWT.
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from biblioteca.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

BCRYPT_PREFIX = "$2"


def hash_password(password: str) -> str:
    """
    Gera hash bcrypt da senha.

    Args:
        password: Senha em texto plano

    Returns:
        Hash bcrypt da senha
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def is_hashed_password(value: str | None) -> bool:
    """Senhas migradas do cadastro antigo ainda estão em texto plano."""
    return isinstance(value, str) and value.startswith(BCRYPT_PREFIX)


def verify_password(plain_password: str, stored_password: str | None) -> bool:
    """
    Verifica a senha contra o valor armazenado.

    Args:
        plain_password: Senha em texto plano
        stored_password: Hash bcrypt ou senha legada em texto plano

    Returns:
        True se a senha está correta
    """
    if not plain_password or not stored_password:
        return False

    if not is_hashed_password(stored_password):
        return hmac.compare_digest(
            plain_password.encode("utf-8"),
            stored_password.encode("utf-8"),
        )

    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            stored_password.encode("utf-8"),
        )
    except ValueError as e:
        logger.debug(f"Erro na verificação de senha: {type(e).__name__}")
        return False


class CredentialVerifier:
    """
    Valida a prova apresentada no login.

    A senha é sempre aceita como prova. Com `legacy_credential_fallback`
    ligado, o RUT do usuário também é aceito, como no cadastro antigo;
    desligue após a migração de senhas.
    """

    def __init__(self, legacy_credential_fallback: bool | None = None):
        if legacy_credential_fallback is None:
            legacy_credential_fallback = settings.LEGACY_CREDENTIAL_FALLBACK
        self.legacy_credential_fallback = legacy_credential_fallback

    def verify(
        self,
        plain: str,
        stored_password: str | None,
        national_id: str | None = None,
    ) -> bool:
        if verify_password(plain, stored_password):
            return True
        if not self.legacy_credential_fallback or not national_id:
            return False
        return hmac.compare_digest(
            plain.strip().encode("utf-8"),
            str(national_id).strip().encode("utf-8"),
        )


def create_access_token(
    subject: str,
    extra_data: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Cria token JWT.

    Args:
        subject: Identificador do usuário
        extra_data: Dados adicionais para incluir no payload
        expires_delta: Tempo de expiração customizado

    Returns:
        Token JWT assinado
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_EXPIRES_MINUTES)

    payload: dict[str, Any] = {
        "sub": subject,
        "exp": now + expires_delta,
        "iat": now,
    }

    if extra_data:
        payload.update(extra_data)

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decodifica e valida token JWT (assinatura e expiração).

    Returns:
        Payload do token ou None se inválido/expirado
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        return None
