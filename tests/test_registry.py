import tempfile
import unittest
from pathlib import Path

from pilotmath.problems.catalog import CATEGORY_INFO, get_category_info, load_catalog
from pilotmath.problems.registry import GENERATORS, generate_problem, generate_problems, get_all_categories
from pilotmath.problems.schema import ProblemCategory
from pilotmath.util.randomness import RandomSource


class RegistryTests(unittest.TestCase):
    def test_every_category_has_a_generator(self) -> None:
        self.assertEqual(set(GENERATORS), set(ProblemCategory))
        self.assertEqual(len(get_all_categories()), 27)

    def test_unknown_category_raises(self) -> None:
        with self.assertRaises(ValueError):
            generate_problem("not-a-category", RandomSource(1))

    def test_accepts_id_string(self) -> None:
        p = generate_problem("slant-range", RandomSource(1))
        self.assertIs(p.category, ProblemCategory.SLANT_RANGE)
        self.assertEqual(str(p.category), "slant-range")

    def test_batch(self) -> None:
        problems = generate_problems(8, "fuel-endurance", RandomSource(4))
        self.assertEqual(len(problems), 8)
        self.assertTrue(all(p.category is ProblemCategory.FUEL_ENDURANCE for p in problems))

    def test_random_category_covers_the_catalog(self) -> None:
        rng = RandomSource(9)
        seen = {generate_problem(None, rng).category for _ in range(2000)}
        self.assertEqual(seen, set(ProblemCategory))


class CatalogTests(unittest.TestCase):
    def test_every_category_documented(self) -> None:
        self.assertEqual(set(CATEGORY_INFO), set(ProblemCategory))
        for cat, info in CATEGORY_INFO.items():
            with self.subTest(category=cat.value):
                self.assertTrue(info.name)
                self.assertTrue(info.formula)
                self.assertTrue(info.example.problem)
                self.assertTrue(info.example.answer)
                self.assertGreater(len(info.example.steps), 0)

    def test_lookup_by_id(self) -> None:
        info = get_category_info("crosswind")
        self.assertIs(info, CATEGORY_INFO[ProblemCategory.CROSSWIND])
        with self.assertRaises(ValueError):
            get_category_info("nope")

    def _write(self, text: str) -> str:
        d = tempfile.mkdtemp()
        p = Path(d) / "catalog.yml"
        p.write_text(text, encoding="utf-8")
        return str(p)

    def test_incomplete_catalog_rejected(self) -> None:
        path = self._write(
            "categories:\n"
            "  crosswind:\n"
            "    name: Crosswind\n"
            "    description: d\n"
            "    formula: f\n"
            "    example: {problem: p, answer: a}\n"
        )
        with self.assertRaisesRegex(ValueError, "no entry for"):
            load_catalog(path)

    def test_unknown_catalog_category_rejected(self) -> None:
        path = self._write("categories:\n  warp-speed:\n    name: x\n")
        with self.assertRaisesRegex(ValueError, "Unknown category"):
            load_catalog(path)

    def test_missing_key_rejected(self) -> None:
        path = self._write("categories:\n  crosswind:\n    name: x\n")
        with self.assertRaisesRegex(ValueError, "missing"):
            load_catalog(path)


if __name__ == "__main__":
    unittest.main()
