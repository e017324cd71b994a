from __future__ import annotations

import importlib.util
import io
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for verb-table tests")
class VerbTableTests(unittest.TestCase):
    def _env(self):
        from ksimple.environment import Environment

        return Environment(stream=io.StringIO())

    def test_tables_cover_every_verb_and_adverb_symbol(self) -> None:
        from ksimple import verbs
        from ksimple.lexer import ADVERB_TOKENS, VERB_TOKENS

        self.assertEqual(len(verbs.MONADIC_VERBS), len(VERB_TOKENS))
        self.assertEqual(len(verbs.DYADIC_VERBS), len(VERB_TOKENS))
        self.assertEqual(len(verbs.ADVERBS), len(ADVERB_TOKENS))
        self.assertEqual("".join(v.symbol for v in verbs.Verb if v), VERB_TOKENS.strip())
        self.assertEqual("".join(a.symbol for a in verbs.AdverbKind if a), ADVERB_TOKENS.strip())

    def test_table_entries_by_verb_tag(self) -> None:
        from ksimple import verbs
        from ksimple.verbs import AdverbKind, Verb

        self.assertIs(verbs.DYADIC_VERBS[Verb.PLUS], verbs.dyadic_add)
        self.assertIs(verbs.DYADIC_VERBS[Verb.MINUS], verbs.dyadic_subtract)
        self.assertIs(verbs.MONADIC_VERBS[Verb.BANG], verbs.monadic_enumerate)
        self.assertIs(verbs.MONADIC_VERBS[Verb.PIPE], verbs.monadic_reverse)
        self.assertIs(verbs.MONADIC_VERBS[Verb.UNKNOWN], verbs.monadic_not_a_verb)
        self.assertIs(verbs.ADVERBS[AdverbKind.OVER], verbs.adverb_over)
        self.assertIs(verbs.ADVERBS[AdverbKind.SCAN], verbs.adverb_scan)
        for verb in (Verb.PLUS, Verb.EQUAL, Verb.TILDE, Verb.AMPERSAND, Verb.STAR):
            with self.subTest(verb=verb):
                self.assertIs(verbs.MONADIC_VERBS[verb], verbs.monadic_not_implemented)

    def test_out_of_range_index_falls_back_to_sentinels(self) -> None:
        from ksimple.values import ERROR, Atom, Vector
        from ksimple.verbs import apply_adverb, apply_dyadic_verb, apply_monadic_verb

        env = self._env()
        self.assertIs(apply_monadic_verb(env, 99, Atom(1)), ERROR)
        self.assertIs(apply_dyadic_verb(env, -1, Atom(1), Atom(2)), ERROR)
        self.assertEqual([str(d) for d in env.diagnostics], ["monadic_not_a_verb: domain", "dyadic_not_a_verb: domain"])

        operand = Vector.of([1, 2])
        self.assertIs(apply_adverb(env, 7, 1, operand), operand)
        self.assertIs(apply_adverb(env, 0, 1, operand), operand)

    def test_nyi_monadic_forms(self) -> None:
        from ksimple.values import ERROR, Atom
        from ksimple.verbs import Verb, apply_monadic_verb

        env = self._env()
        self.assertIs(apply_monadic_verb(env, Verb.PLUS, Atom(1)), ERROR)
        self.assertEqual([d.message for d in env.diagnostics], ["nyi"])

    def test_enumerate(self) -> None:
        from ksimple.values import ERROR, Atom, Vector
        from ksimple.verbs import monadic_enumerate

        env = self._env()
        self.assertEqual(monadic_enumerate(env, Atom(4)), Vector.of([0, 1, 2, 3]))
        self.assertEqual(monadic_enumerate(env, Atom(0)), Vector.of([]))
        self.assertIs(monadic_enumerate(env, Atom(-1)), ERROR)
        self.assertIs(monadic_enumerate(env, Vector.of([1])), ERROR)
        self.assertIs(monadic_enumerate(env, ERROR), ERROR)
        self.assertEqual([d.message for d in env.diagnostics], ["domain", "rank"])

    def test_modulo_truncates_toward_zero(self) -> None:
        from ksimple.values import ERROR, Atom, Vector
        from ksimple.verbs import dyadic_modulo

        env = self._env()
        self.assertEqual(dyadic_modulo(env, Atom(3), Atom(10)), Atom(1))
        self.assertEqual(dyadic_modulo(env, Atom(3), Atom(-7)), Atom(-1))
        self.assertEqual(dyadic_modulo(env, Atom(-3), Atom(7)), Atom(1))
        self.assertEqual(dyadic_modulo(env, Atom(3), Vector.of([1, 2, 3, 4, 5])), Vector.of([1, 2, 0, 1, 2]))
        self.assertIs(dyadic_modulo(env, Atom(0), Atom(5)), ERROR)
        self.assertIs(dyadic_modulo(env, Vector.of([1]), Atom(5)), ERROR)
        self.assertEqual([str(d) for d in env.diagnostics], ["dyadic_modulo: domain"] * 2)

    def test_take(self) -> None:
        from ksimple.values import ERROR, Atom, Vector
        from ksimple.verbs import dyadic_take

        env = self._env()
        self.assertEqual(dyadic_take(env, Atom(3), Atom(7)), Vector.of([7, 7, 7]))
        self.assertEqual(dyadic_take(env, Atom(5), Vector.of([1, 2, 3])), Vector.of([1, 2, 3, 1, 2]))
        self.assertEqual(dyadic_take(env, Atom(0), Vector.of([1, 2])), Vector.of([]))
        self.assertEqual(dyadic_take(env, Atom(0), Vector.of([])), Vector.of([]))
        self.assertIs(dyadic_take(env, Atom(2), Vector.of([])), ERROR)
        self.assertIs(dyadic_take(env, Atom(-1), Vector.of([1])), ERROR)
        self.assertIs(dyadic_take(env, Vector.of([1]), Atom(1)), ERROR)
        self.assertEqual([d.message for d in env.diagnostics], ["length", "domain", "rank"])

    def test_concatenate(self) -> None:
        from ksimple.values import ERROR, Atom, Vector
        from ksimple.verbs import dyadic_concatenate

        env = self._env()
        self.assertEqual(dyadic_concatenate(env, Atom(1), Atom(2)), Vector.of([1, 2]))
        self.assertEqual(dyadic_concatenate(env, Vector.of([1, 2]), Atom(3)), Vector.of([1, 2, 3]))
        self.assertEqual(dyadic_concatenate(env, Atom(0), Vector.of([])), Vector.of([0]))
        self.assertIs(dyadic_concatenate(env, ERROR, Atom(1)), ERROR)
        self.assertEqual(env.diagnostics, [])

    def test_index_at(self) -> None:
        from ksimple.values import ERROR, Atom, Vector
        from ksimple.verbs import dyadic_index_at, monadic_first

        env = self._env()
        v = Vector.of([10, 20, 30])
        self.assertEqual(dyadic_index_at(env, v, Atom(1)), Atom(20))
        self.assertEqual(dyadic_index_at(env, v, Atom(3)), Atom(0))
        self.assertEqual(dyadic_index_at(env, v, Vector.of([-1, 0, 2, 5])), Vector.of([10, 10, 30, 0]))
        self.assertEqual(dyadic_index_at(env, Vector.of([]), Vector.of([0, 1])), Vector.of([0, 0]))
        self.assertEqual(monadic_first(env, v), Atom(10))
        self.assertEqual(monadic_first(env, Vector.of([])), Atom(0))
        self.assertEqual(env.diagnostics, [])

        self.assertIs(dyadic_index_at(env, v, Atom(4)), ERROR)
        self.assertIs(dyadic_index_at(env, v, Atom(-1)), ERROR)
        self.assertIs(dyadic_index_at(env, Atom(1), Atom(0)), ERROR)
        self.assertEqual([d.message for d in env.diagnostics], ["length", "length", "rank"])

    def test_elementwise_verbs(self) -> None:
        from ksimple.values import Atom, Vector
        from ksimple.verbs import dyadic_and, dyadic_equal, dyadic_not_equal, dyadic_or, dyadic_product

        env = self._env()
        self.assertEqual(dyadic_equal(env, Vector.of([1, 2, 3]), Vector.of([1, 5, 3])), Vector.of([1, 0, 1]))
        self.assertEqual(dyadic_not_equal(env, Vector.of([1, 2, 3]), Atom(2)), Vector.of([1, 0, 1]))
        self.assertEqual(dyadic_and(env, Atom(12), Atom(10)), Atom(8))
        self.assertEqual(dyadic_or(env, Atom(12), Atom(10)), Atom(14))
        self.assertEqual(dyadic_product(env, Atom(2), Vector.of([1, 2, 3])), Vector.of([2, 4, 6]))

    def test_wrapping_arithmetic(self) -> None:
        from ksimple.values import Atom
        from ksimple.verbs import dyadic_add, dyadic_product, dyadic_subtract

        env = self._env()
        self.assertEqual(dyadic_add(env, Atom(2**63 - 1), Atom(1)), Atom(-(2**63)))
        self.assertEqual(dyadic_subtract(env, Atom(-(2**63)), Atom(1)), Atom(2**63 - 1))
        self.assertEqual(dyadic_product(env, Atom(2**62), Atom(2)), Atom(-(2**63)))

    def test_length_mismatch_reports_domain_of_the_verb(self) -> None:
        from ksimple.values import ERROR, Vector
        from ksimple.verbs import dyadic_subtract

        env = self._env()
        self.assertIs(dyadic_subtract(env, Vector.of([1, 2]), Vector.of([1, 2, 3])), ERROR)
        self.assertEqual([str(d) for d in env.diagnostics], ["dyadic_add: domain"])

    def test_fold(self) -> None:
        from ksimple.values import ERROR, Atom, Vector
        from ksimple.verbs import Verb, adverb_over

        env = self._env()
        self.assertEqual(adverb_over(env, Verb.PLUS, Vector.of([1, 2, 3, 4])), Atom(10))
        self.assertEqual(adverb_over(env, Verb.MINUS, Vector.of([1, 2, 3])), Atom(-6))
        # The accumulator is seeded with 0, so a product fold is always 0.
        self.assertEqual(adverb_over(env, Verb.STAR, Vector.of([1, 2, 3])), Atom(0))
        self.assertEqual(adverb_over(env, Verb.PLUS, Vector.of([])), Atom(0))
        self.assertEqual(adverb_over(env, Verb.PLUS, Atom(5)), Atom(5))
        self.assertIs(adverb_over(env, Verb.PLUS, ERROR), ERROR)
        self.assertEqual(adverb_over(env, Verb.COMMA, Vector.of([1, 2])), Vector.of([0, 1, 2]))

    def test_scan(self) -> None:
        from ksimple.values import ERROR, Atom, Vector
        from ksimple.verbs import Verb, adverb_scan

        env = self._env()
        self.assertEqual(adverb_scan(env, Verb.PLUS, Vector.of([1, 2, 3, 4])), Vector.of([1, 3, 6, 10]))
        self.assertEqual(adverb_scan(env, Verb.MINUS, Vector.of([5, 1, 1])), Vector.of([5, 4, 3]))
        self.assertEqual(adverb_scan(env, Verb.PLUS, Vector.of([])), Vector.of([]))
        self.assertEqual(adverb_scan(env, Verb.PLUS, Atom(3)), Atom(3))
        self.assertIs(adverb_scan(env, Verb.PLUS, ERROR), ERROR)
        self.assertEqual(env.diagnostics, [])

    def test_scan_substitutes_zero_after_a_failed_step(self) -> None:
        from ksimple.values import Vector
        from ksimple.verbs import Verb, adverb_scan

        env = self._env()
        # 1!2 is 0, then 0!3 is a domain error; the scan keeps going with zeros.
        self.assertEqual(adverb_scan(env, Verb.BANG, Vector.of([1, 2, 3, 4])), Vector.of([1, 0, 0, 0]))
        self.assertEqual([str(d) for d in env.diagnostics], ["dyadic_modulo: domain"])

        # A step yielding a vector is also treated as a failure, silently.
        quiet = self._env()
        self.assertEqual(adverb_scan(quiet, Verb.COMMA, Vector.of([1, 2, 3])), Vector.of([1, 0, 0]))
        self.assertEqual(quiet.diagnostics, [])


if __name__ == "__main__":
    unittest.main()
