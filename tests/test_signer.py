import hashlib
import unittest

from paygate.exceptions import ConfigurationError
from paygate.psp.parameters import ParameterStore
from paygate.psp.signer import Signer


def md5_upper(text: str, encoding: str = "gbk") -> str:
    return hashlib.md5(text.encode(encoding)).hexdigest().upper()


class TestSigner(unittest.TestCase):
    def setUp(self):
        self.signer = Signer("K")

    def test_known_vector(self):
        params = {"partner": "M1", "out_trade_no": "ORD1"}
        self.assertEqual(self.signer.canonical_string(params), "out_trade_no=ORD1&partner=M1&key=K")
        self.assertEqual(self.signer.sign(params), md5_upper("out_trade_no=ORD1&partner=M1&key=K"))

    def test_deterministic_across_input_types(self):
        fields = {"b": "2", "a": "1", "c": "3"}
        store = ParameterStore.from_mapping(fields)
        self.assertEqual(self.signer.sign(fields), self.signer.sign(store))
        self.assertEqual(self.signer.sign(fields), self.signer.sign(dict(reversed(list(fields.items())))))

    def test_empty_values_and_sign_field_excluded(self):
        base = {"a": "1", "b": "2"}
        with_extras = dict(base, attach="", sign="WHATEVER")
        self.assertEqual(self.signer.sign(base), self.signer.sign(with_extras))

    def test_ordinal_sort(self):
        params = {"a": "3", "B": "2", "A": "1"}
        self.assertEqual(self.signer.canonical_string(params), "A=1&B=2&a=3&key=K")

    def test_non_ascii_names_sort_by_encoded_bytes(self):
        # GBK puts \u963f (B0A2) before \u4e00 (D2BB), the reverse of code point order
        params = {"\u4e00": "1", "\u963f": "2"}
        self.assertEqual(self.signer.canonical_string(params), "\u963f=2&\u4e00=1&key=K")
        self.assertEqual(
            Signer("K", encoding="utf-8").canonical_string(params), "\u4e00=1&\u963f=2&key=K"
        )

    def test_no_qualifying_parameters(self):
        self.assertEqual(self.signer.canonical_string({"sign": "X", "attach": ""}), "key=K")
        self.assertEqual(self.signer.sign({}), md5_upper("key=K"))

    def test_encoding_affects_non_ascii(self):
        params = {"body": "测试商品"}
        canonical = "body=测试商品&key=K"
        self.assertEqual(self.signer.sign(params), md5_upper(canonical, "gbk"))
        self.assertNotEqual(self.signer.sign(params), md5_upper(canonical, "utf-8"))
        self.assertEqual(Signer("K", encoding="utf-8").sign(params), md5_upper(canonical, "utf-8"))

    def test_lowercase_and_other_digest(self):
        signer = Signer("K", digest="sha256", uppercase=False)
        self.assertEqual(signer.sign({"a": "1"}), hashlib.sha256(b"a=1&key=K").hexdigest())

    def test_verify(self):
        params = {"a": "1", "b": "2"}
        params["sign"] = self.signer.sign(params)
        self.assertTrue(self.signer.verify(params))
        self.assertFalse(Signer("other").verify(params))

        params["b"] = "3"
        self.assertFalse(self.signer.verify(params))

    def test_verify_missing_signature(self):
        self.assertFalse(self.signer.verify({"a": "1"}))
        self.assertFalse(self.signer.verify({"a": "1", "sign": ""}))

    def test_verify_is_case_sensitive(self):
        params = {"a": "1"}
        params["sign"] = self.signer.sign(params).lower()
        self.assertFalse(self.signer.verify(params))

    def test_configuration_errors(self):
        with self.assertRaises(ConfigurationError):
            Signer("")
        with self.assertRaises(ConfigurationError):
            Signer("K", digest="not-a-digest")
        with self.assertRaises(ConfigurationError):
            Signer("K", encoding="no-such-codec")


if __name__ == "__main__":
    unittest.main()
