import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from key_factory import pkcs8_pem


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def rsa_pem(rsa_key) -> str:
    return pkcs8_pem(rsa_key)
