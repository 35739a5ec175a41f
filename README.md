# xfon

Display information about X.509 certificates from the command line.

xfon reads certificates in PEM or DER form, including bundles made of
several concatenated certificates, decodes them and either prints their
properties or arranges them in a tree from issuer to issued certificate.

## Installation

```
pip install .
```

## Usage

```
xfon <command> [<args>]
xfon -h | --help
xfon -V | --version
```

Commands:

- `show` prints the properties of certificates: subject, version, serial,
  signature algorithms, issuer, validity, public key bytes, extensions and
  signature bytes.
- `tree` prints the certificates as a hierarchy. Duplicate certificates
  (same DER bytes) are dropped first, with a warning. A certificate is
  placed under another when its issuer name equals the other's subject
  name, its authority key identifier (when it carries one) equals the
  other's subject key identifier, and its signature verifies against the
  other's public key.

With no file given, certificates are read from standard input. The exit
status is 0 on success and 1 when a file cannot be opened, read or decoded.

### Show certificates

```
xfon show ca-root.crt server.crt
```

When more than one certificate is shown, each line is prefixed with its
location: the file name, followed by `:<index>` when the file holds
several certificates (counted from 0).

### Print a tree

```
xfon tree ca-root.crt ca-level1-a.crt ca-level2-a.crt
```

Use `-m` / `--minimal` for a compact tree:

```
xfon tree -m root.crt level1-a.crt level2-a.crt level1-b.crt
```

```
cn:Root YY(root.crt)
├── cn:level1-a(level1-a.crt)
│   └── cn:level2-a(level2-a.crt)
└── cn:level1-b(level1-b.crt)
```

Both commands accept `-v` / `--verbose`, repeatable, to print more
diagnostic messages on standard error. By default errors and warnings are
shown.

## Library use

The loading, decoding and rendering functions can be used directly:

```python
from xfon.load import load_certificates
from xfon.hierarchy import compute_hierarchy
from xfon.render import format_tree

certs = load_certificates(["bundle.pem"])
compute_hierarchy(certs)
print(format_tree(certs, True), end="")
```

`xfon.x509.decode_certificate` turns DER bytes into a `Certificate` and
raises `xfon.der.DecodeError` when they cannot be decoded;
`xfon.render.format_cert` gives the text that `xfon show` prints for one
certificate. `load_certificates` raises `xfon.load.LoadError` on failure.

## What it does not do

- There is no `diff` command: the usage text lists it, but `xfon diff` is
  rejected as an unrecognized command.
- `xfon show` accepts `--format`, `--style` and `--properties`, and
  `xfon tree` accepts `--properties`, but they have no effect: output is
  always the plain text described above.
- The tree does not break circular issuance or choose between several
  possible issuers; a certificate with two issuers is printed under each,
  and certificates that are all issued by one another are not printed.
- Two-digit UTCTime years are always read as 20xx.