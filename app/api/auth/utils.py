import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwt
from passlib.context import CryptContext

from app.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password[:72], hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hashes a password.
    bcrypt only looks at the first 72 bytes.
    """
    return pwd_context.hash(password[:72])


@lru_cache
def get_key_pair() -> Tuple[str, str]:
    """
    Returns the (private, public) PEM pair used to sign and verify tokens.
    """
    private_pem = settings.JWT_PRIVATE_KEY.replace("\\n", "\n")
    public_pem = settings.JWT_PUBLIC_KEY.replace("\\n", "\n")
    if private_pem and public_pem:
        return private_pem, public_pem
    if private_pem or public_pem:
        raise ValueError("JWT_PRIVATE_KEY and JWT_PUBLIC_KEY must be set together")

    logger.warning("JWT keys are not configured, generating an ephemeral RSA key pair")
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Signs a JWT with the RSA private key."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = data.copy()
    to_encode.update({"iss": settings.JWT_ISSUER, "iat": now, "exp": expire})

    private_pem, _ = get_key_pair()
    return jwt.encode(to_encode, private_pem, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verifies signature, expiry and issuer. Raises jose.JWTError on failure."""
    _, public_pem = get_key_pair()
    return jwt.decode(
        token,
        public_pem,
        algorithms=[settings.JWT_ALGORITHM],
        issuer=settings.JWT_ISSUER,
    )


def scope_for_role(role: str) -> str:
    return f"ROLE_{role}"
