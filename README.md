# mpctss

Cryptographic building blocks for threshold signature schemes, written in
Python on top of the standard library and `cryptography`.

## What is inside

- `mpctss.security.validation` — parameter checks (`validate_threshold`,
  `validate_party_id`, `validate_scalar_in_range`,
  `validate_nonzero_scalar`, `sanitize_input`) raising `ValidationError`
  subclasses, and `generate_random_scalar` for values in `[1, max)`.
- `mpctss.security.memory` — `secure_zero` to wipe a mutable buffer in
  place, and byte-level comparison and selection helpers
  (`constant_time_compare`, `constant_time_select_bytes`,
  `constant_time_byte_eq`, `constant_time_eq`, `constant_time_less_or_eq`).
- `mpctss.security.constant_time` — modular arithmetic on integers
  (`constant_time_mod_add`, `_sub`, `_mul`, `_inv`, `_exp`, `_sqr`, `_neg`,
  `timing_safe_div`), branch-free selection and swapping
  (`constant_time_select`, `constant_time_cond_swap`,
  `constant_time_array_access`), comparisons, and random blinding
  (`mask_big_int`, `unmask_big_int`). These keep the shape of constant-time
  code, but Python integer arithmetic itself gives no timing guarantees.
- `mpctss.crypto.curve` — elliptic curves behind one abstract `Curve`
  interface (`base`), with `Point`, `Scalar`, `CurveParams` and `CurveType`.
  `weierstrass` provides `Secp256k1Curve` (with `sign_ecdsa`,
  `verify_ecdsa` and `recover_public_key`) and `P256Curve`; `ed25519`
  provides `Ed25519Curve` (with `sign_eddsa` and `verify_eddsa`);
  `registry.new_curve` builds a curve from a `CurveType`.
- `mpctss.crypto.rand` — secure random bytes, scalars in `[1, max)`,
  integers in `[min, max)`, nonces, primes and an in-place `shuffle`.
- `mpctss.crypto.hash_to_curve` — `expand_message_xmd` (SHA-256),
  `hash_to_field`, `mod_sqrt`, `hash_to_curve_rfc9380` and
  `derive_independent_generators`. The point search solves
  `y^2 = x^3 + b`, so it finds points on secp256k1; on P-256 and Ed25519 it
  raises `HashToCurveFailedError`.
- `mpctss.crypto.hashing` — SHA-256/SHA-512 (`hash_data`,
  `HashFunction`), `hash_to_scalar`, `hash_to_curve`, `hmac_sha256`,
  `verify_hmac`, `hkdf`, `derive_key`, `hash_commit`, `verify_hash_commit`,
  `combine_hashes`, `hash_points`, `fiat_shamir_challenge`,
  `deterministic_nonce`, `merkle_root` and `blake3_hash` (currently SHA-256).
- `mpctss.crypto.commitment` — Pedersen commitments (`GeneratorPair`,
  `PedersenCommitment`, `add_commitments`, `scalar_mul_commitment`) and
  timestamped HMAC-SHA256 hash commitments (`HashCommitment`,
  `verify_hash_commitment`, `batch_hash_commit`, `commit_to_curve_point`,
  `verify_commitment_to_curve_point`). `verify_hash_commitment` also
  rejects timestamps older than one hour or in the future.
- `mpctss.algebra.polynomial` — `Polynomial` over a prime field (random
  construction, Horner evaluation, addition, subtraction, scalar
  multiplication) and Lagrange `interpolate`.
- `mpctss.algebra.shamir` — `(t, n)` `ShamirSecretSharing` with `split`,
  `combine`, `combine_at_point` and `refresh_shares`; `Share`,
  `add_shares`, `scalar_mul_share` and Feldman-style `verify_share`.

Errors are raised as exceptions; each area has its own base class
(`ValidationError`, `CurveError`, `RandomError`, `HashError`,
`CommitmentError`, `AlgebraError`) with one subclass per failure.

## Examples

Split a secret and put it back together:

```python
from mpctss.algebra.shamir import ShamirSecretSharing

modulus = 2**127 - 1
sss = ShamirSecretSharing(2, 3, modulus)

shares, polynomial = sss.split(123456789)
assert sss.combine(shares[:2]) == 123456789
assert sss.combine([shares[2], shares[0]]) == 123456789
```

Elliptic curve arithmetic:

```python
from mpctss.crypto.curve.base import CurveType
from mpctss.crypto.curve.registry import new_curve

curve = new_curve(CurveType.SECP256K1)
p = curve.scalar_base_mult(7)
q = curve.scalar_base_mult(5)
assert curve.add(p, q) == curve.scalar_base_mult(12)
assert curve.unmarshal(curve.marshal(p)) == p
```

Pedersen commitments (on secp256k1):

```python
from mpctss.crypto.commitment import GeneratorPair, add_commitments

generators = GeneratorPair.for_curve(curve)
c1 = generators.commit(10, None)
c2 = generators.commit(32, None)
total = add_commitments(c1, c2)
assert total.value == 42
assert total.verify(generators)
```

Hash commitments:

```python
from mpctss.crypto.commitment import HashCommitment

commitment = HashCommitment.create(b"my bid", b"auction-1")
assert commitment.verify()
```

Hashing helpers:

```python
from mpctss.crypto.hashing import HashFunction, hash_data, merkle_root

digest = hash_data(b"hello", HashFunction.SHA256)
root = merkle_root([digest, hash_data(b"world", HashFunction.SHA256)])
```

## What this package does not do

It is a library of primitives only. It has no distributed key generation
protocol, no multi-round threshold signing protocol, no network transport
between parties and no command-line programs. Those have to be built on top
of the pieces above.

## Testing

The test suite uses pytest, installed with the `test` extra:

```
pip install -e .[test]
pytest
```