from tixml.version import printable, revision, stable, with_revision


def test_stable_version():
    assert stable() == "1.0.0"


def test_revision():
    assert revision() == "1.0.0"


def test_with_revision():
    assert with_revision() == "1.0.0.1.0.0"
    assert with_revision().startswith(stable() + ".")
    assert with_revision().endswith("." + revision())


def test_printable_names_architecture():
    assert printable() in {"1.0.0 (64-bit)", "1.0.0 (32-bit)"}
    assert printable().split(" ")[0] == stable()