from axiom_governance.utils.checksum import compute_directory_checksums, fingerprint_payload, verify_checksums


def test_compute_and_verify_checksums(tmp_path):
    file1 = tmp_path / "a.json"
    file1.write_text("[{\"id\": \"p1\"}]", encoding="utf-8")
    file2 = tmp_path / "b.yaml"
    file2.write_text("- id: p2\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    checksums = compute_directory_checksums(tmp_path)
    assert set(checksums) == {"a.json", "b.yaml"}

    ok, mismatches = verify_checksums(checksums, checksums)
    assert ok
    assert mismatches == {}

    tampered = dict(checksums)
    tampered["a.json"] = "different"
    ok, mismatches = verify_checksums(checksums, tampered)
    assert not ok
    assert "a.json" in mismatches


def test_fingerprint_ignores_key_order():
    assert fingerprint_payload({"a": 1, "b": [1, 2]}) == fingerprint_payload({"b": [1, 2], "a": 1})
    assert fingerprint_payload({"a": 1}) != fingerprint_payload({"a": 2})
