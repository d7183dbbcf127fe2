# PASSWORD + TOKEN HASHING

import hashlib # Import hashlib for the fast SHA-256 token digest.
import uuid # Import uuid to mint opaque session tokens.

from passlib.context import CryptContext # Import CryptContext for password hashing.
from passlib.exc import UnknownHashError

# --- Password Hashing ---
# Create a CryptContext instance, specifying argon2 as the hashing scheme.
# 'deprecated="auto"' will automatically handle updating hashes if you change schemes in the future.
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

# Function to hash a plain-text password. A fresh random salt is generated per call,
# so two hashes of the same password never match textually.
def hash_password(password: str) -> str:
    return pwd_context.hash(password)

# Function to verify a plain-text password against a hashed one.
# A malformed or foreign stored hash counts as a mismatch.
def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (UnknownHashError, ValueError, TypeError):
        return False

# --- Session Tokens ---
# Function to create a new opaque bearer token. Only its digest is ever stored.
def new_session_token() -> str:
    return str(uuid.uuid4())

# Function to derive the lookup digest of a bearer token (hex SHA-256).
def hash_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()

# Function to check that text can be stored or hashed as UTF-8.
# JSON allows lone surrogates ("\ud800") that have no UTF-8 encoding.
def is_encodable(text: str) -> bool:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
