import unittest

from concert_match.config import MatchConfig
from concert_match.core.aliases import (
    ALL_ALIASES,
    ARTIST_ALIASES,
    CITY_ALIASES,
    VENUE_ALIASES,
    AliasResolver,
    builtin_aliases_for,
    lookup_builtin,
    resolve_aliases,
    resolve_city_alias,
)
from concert_match.core.aliases.data import lookup_builtin_normalized


class TestBuiltinTables(unittest.TestCase):
    def test_table_size(self):
        self.assertGreaterEqual(len(ALL_ALIASES), 100)
        self.assertEqual(
            len(ALL_ALIASES), len(ARTIST_ALIASES) + len(VENUE_ALIASES) + len(CITY_ALIASES)
        )

    def test_keys_are_lower_case_and_trimmed(self):
        for key in ALL_ALIASES:
            self.assertEqual(key, key.lower().strip())

    def test_tables_are_read_only(self):
        with self.assertRaises(TypeError):
            ARTIST_ALIASES["new alias"] = "Someone"  # type: ignore[index]

    def test_lookup(self):
        self.assertEqual(lookup_builtin("  MSG ", "venue"), "Madison Square Garden")
        self.assertIsNone(lookup_builtin("msg", "artist"))
        self.assertEqual(lookup_builtin("msg"), "Madison Square Garden")
        self.assertIsNone(lookup_builtin(""))

    def test_normalized_lookup(self):
        self.assertEqual(lookup_builtin_normalized("AC-DC", "artist"), "AC/DC")

    def test_reverse_lookup(self):
        aliases = builtin_aliases_for("prince", "artist")
        self.assertIn("tafkap", aliases)
        self.assertIn("the artist formerly known as prince", aliases)


class TestResolve(unittest.TestCase):
    def setUp(self):
        self.resolver = AliasResolver()

    def test_builtin_exact(self):
        result = self.resolver.resolve("nyc", "city")
        self.assertEqual(result.canonical, "New York City")
        self.assertEqual(result.resolution_type, "exact")
        self.assertEqual(result.confidence, 100)
        self.assertTrue(result.resolved)

    def test_builtin_exact_ignores_case(self):
        result = self.resolver.resolve_city("  NYC ")
        self.assertEqual(result.canonical, "New York City")
        self.assertEqual(result.confidence, 100)

    def test_builtin_normalized(self):
        result = self.resolver.resolve_artist("AC-DC")
        self.assertEqual(result.canonical, "AC/DC")
        self.assertEqual(result.resolution_type, "normalized")
        self.assertEqual(result.confidence, 95)

    def test_fuzzy(self):
        result = self.resolver.resolve_artist("Creedance")
        self.assertEqual(result.canonical, "Creedence Clearwater Revival")
        self.assertEqual(result.resolution_type, "fuzzy")
        self.assertEqual(result.confidence, 89)

    def test_fuzzy_never_reaches_100(self):
        resolver = AliasResolver(MatchConfig(min_similarity=0, min_confidence=0))
        result = resolver.resolve_venue("Carnegie Hal")
        self.assertEqual(result.resolution_type, "fuzzy")
        self.assertLessEqual(result.confidence, 95)

    def test_category_scoping(self):
        self.assertIsNone(self.resolver.resolve("msg", "city").canonical)
        self.assertEqual(self.resolver.resolve_venue("msg").canonical, "Madison Square Garden")

    def test_unresolved(self):
        result = self.resolver.resolve("qqqqqqqq")
        self.assertIsNone(result.canonical)
        self.assertEqual(result.confidence, 0)
        self.assertEqual(result.resolution_type, "none")
        self.assertFalse(result.resolved)

    def test_empty_input(self):
        result = self.resolver.resolve("")
        self.assertEqual(result.resolution_type, "none")
        self.assertEqual(result.suggestions, ())

    def test_suggestions(self):
        resolver = AliasResolver(MatchConfig(min_similarity=95, min_confidence=95))
        result = resolver.resolve_city("londn")
        self.assertEqual(result.resolution_type, "none")
        self.assertIn("London", result.suggestions)
        self.assertLessEqual(len(result.suggestions), 3)
        self.assertEqual(len(result.suggestions), len(set(result.suggestions)))

    def test_resolve_is_idempotent(self):
        self.assertEqual(self.resolver.resolve("The Boss"), self.resolver.resolve("The Boss"))


class TestCustomAliases(unittest.TestCase):
    def setUp(self):
        self.resolver = AliasResolver()

    def test_custom_confidence_is_returned(self):
        self.resolver.add("The Mothership", "Madison Square Garden", "venue", confidence=98)
        result = self.resolver.resolve("the mothership", "venue")
        self.assertEqual(result.canonical, "Madison Square Garden")
        self.assertEqual(result.confidence, 98)
        self.assertEqual(result.resolution_type, "exact")

    def test_custom_default_confidence(self):
        entry = self.resolver.add("Purple One", "Prince", "artist")
        self.assertEqual(entry.confidence, 95)
        self.assertEqual(entry.alias, "purple one")
        self.assertEqual(self.resolver.resolve_artist("PURPLE ONE").confidence, 95)

    def test_custom_checked_before_builtin(self):
        self.resolver.add("msg", "Madison Square Garden Theater", "venue", confidence=99)
        self.assertEqual(self.resolver.resolve_venue("MSG").canonical, "Madison Square Garden Theater")

    def test_custom_respects_category(self):
        self.resolver.add("The Mothership", "Madison Square Garden", "venue", confidence=98)
        result = self.resolver.resolve("the mothership", "artist")
        self.assertNotEqual(result.canonical, "Madison Square Garden")

    def test_custom_below_min_confidence_falls_through(self):
        self.resolver.add("nyc", "Not New York", "city", confidence=10)
        result = self.resolver.resolve_city("nyc")
        self.assertEqual(result.canonical, "New York City")

    def test_remove(self):
        self.resolver.add("purple one", "Prince", "artist")
        self.assertTrue(self.resolver.remove("Purple One"))
        self.assertFalse(self.resolver.remove("Purple One"))
        self.assertEqual(self.resolver.custom_aliases(), [])

    def test_list_for_merges_sources(self):
        self.resolver.add("His Purple Majesty", "Prince", "artist")
        aliases = self.resolver.list_for("PRINCE", "artist")
        self.assertIn("tafkap", aliases)
        self.assertIn("his purple majesty", aliases)
        self.assertEqual(len(aliases), len(set(aliases)))

    def test_list_for_unknown(self):
        self.assertEqual(self.resolver.list_for("Nobody In Particular"), [])
        self.assertEqual(self.resolver.list_for(""), [])

    def test_has_aliases(self):
        self.assertTrue(self.resolver.has_aliases("gnr", "artist"))
        self.assertFalse(self.resolver.has_aliases("qqqqqqqq"))

    def test_stats(self):
        self.resolver.add("purple one", "Prince", "artist")
        self.resolver.add("the mothership", "Madison Square Garden", "venue")
        stats = self.resolver.stats()
        self.assertEqual(stats.custom.artists, 1)
        self.assertEqual(stats.custom.venues, 1)
        self.assertEqual(stats.custom.cities, 0)
        self.assertEqual(stats.custom.total, 2)
        self.assertEqual(stats.built_in.total, len(ALL_ALIASES))


class TestBatch(unittest.TestCase):
    def test_summary(self):
        batch = AliasResolver().resolve_batch(["nyc", "qqqqqqqq"], "city")
        self.assertEqual(batch.summary.total_inputs, 2)
        self.assertEqual(batch.summary.resolved, 1)
        self.assertEqual(batch.summary.unresolved, 1)
        self.assertEqual(batch.summary.average_confidence, 50.0)
        self.assertEqual(batch.results[0].canonical, "New York City")

    def test_empty_batch(self):
        batch = AliasResolver().resolve_batch([])
        self.assertEqual(batch.summary.total_inputs, 0)
        self.assertEqual(batch.summary.average_confidence, 0.0)


class TestModuleFunctions(unittest.TestCase):
    def test_resolve_city_alias(self):
        self.assertEqual(resolve_city_alias("nyc").canonical, "New York City")

    def test_resolve_aliases(self):
        batch = resolve_aliases(["gnr", "rhcp"], "artist")
        self.assertEqual(
            [result.canonical for result in batch.results],
            ["Guns N' Roses", "Red Hot Chili Peppers"],
        )


if __name__ == "__main__":
    unittest.main()
