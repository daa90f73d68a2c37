import json

import pytest

from main import bundle_from_dict, main
from params import LEGACY_PRIME


@pytest.fixture
def bundle(tmp_path):
    path = tmp_path / "bundle.json"
    assert main(["split", "--secret", "1234", "-t", "3", "-n", "5", "--prime", "2089", "-o", str(path)]) == 0
    return path


def test_split_writes_parameter_record(bundle):
    record = json.loads(bundle.read_text())
    assert record["parameters"]["prime"] == 2089
    assert record["parameters"]["threshold"] == 3
    assert record["parameters"]["share_count"] == 5
    assert record["parameters"]["generator"] is not None
    assert [x for x, _ in record["shares"]] == [1, 2, 3, 4, 5]
    assert len(record["commitments"]) == 3
    setup, shares, commitments = bundle_from_dict(record)
    assert commitments.modulus == setup.modulus


def test_verify_and_reconstruct(bundle, capsys):
    assert main(["verify", str(bundle)]) == 0
    assert "INVALID" not in capsys.readouterr().out
    assert main(["reconstruct", str(bundle), "--use", "1,3,5"]) == 0
    assert capsys.readouterr().out.strip() == "1234"


def test_tampered_share_is_reported(bundle, capsys):
    record = json.loads(bundle.read_text())
    record["shares"][1][1] = (record["shares"][1][1] + 1) % 2089
    bundle.write_text(json.dumps(record))
    assert main(["verify", str(bundle)]) == 1
    out = capsys.readouterr().out
    assert "Share 2: INVALID" in out
    assert out.count("INVALID") == 1


def test_reconstruct_with_too_few_shares(bundle, capsys):
    assert main(["reconstruct", str(bundle), "--use", "1,2"]) == 1
    assert "Need 3 shares" in capsys.readouterr().err


def test_plain_shamir_bundle(tmp_path, capsys):
    path = tmp_path / "plain.json"
    assert main(["split", "--secret", "7", "-t", "2", "-n", "3", "--prime", "2089", "--no-feldman", "-o", str(path)]) == 0
    record = json.loads(path.read_text())
    assert record["commitments"] is None
    assert record["parameters"]["generator"] is None
    with pytest.raises(SystemExit):
        main(["verify", str(path)])


def test_bad_threshold_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as info:
        main(["split", "--secret", "1", "-t", "6", "-n", "5"])
    assert info.value.code == 2
    assert "Threshold cannot be greater" in capsys.readouterr().err


def test_demo_runs(capsys):
    assert main(["demo", "--prime", "2089"]) == 0
    out = capsys.readouterr().out
    assert "Reconstructed secret from 3 shares: 786" in out
    assert "Recovered secret: 786" in out
    assert "validity is False" in out


def test_non_integer_use_list_is_a_usage_error(bundle, capsys):
    with pytest.raises(SystemExit) as info:
        main(["reconstruct", str(bundle), "--use", "1,x,5"])
    assert info.value.code == 2
    assert "comma separated integers" in capsys.readouterr().err


@pytest.mark.parametrize("command", ["verify", "reconstruct"])
def test_missing_bundle_is_reported(tmp_path, capsys, command):
    assert main([command, str(tmp_path / "nowhere.json")]) == 1
    assert "Cannot read" in capsys.readouterr().err


@pytest.mark.parametrize("content", ["not json", "[]", '{"shares": []}', '{"parameters": {"prime": 2089}}'])
def test_malformed_bundle_is_reported(tmp_path, capsys, content):
    path = tmp_path / "broken.json"
    path.write_text(content)
    assert main(["reconstruct", str(path)]) == 1
    assert "not a valid share bundle" in capsys.readouterr().err


@pytest.mark.parametrize("bits", ["1", "0", "-3", "many"])
def test_prime_bits_below_two_is_a_usage_error(capsys, bits):
    with pytest.raises(SystemExit) as info:
        main(["split", "--secret", "1", "--prime-bits", bits])
    assert info.value.code == 2


def test_legacy_prime_option(tmp_path):
    path = tmp_path / "legacy.json"
    assert main(["split", "--secret", "786", "--legacy-prime", "-o", str(path)]) == 0
    record = json.loads(path.read_text())
    assert record["parameters"]["prime"] == LEGACY_PRIME
    assert main(["verify", str(path)]) == 0
