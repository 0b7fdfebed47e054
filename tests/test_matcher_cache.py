import unittest

from concert_match.cache.matcher_cache import MatcherCache, config_hash
from concert_match.config import MatchConfig, MatcherCacheConfig
from concert_match.matcher import EntityMatcher
from concert_match.models import ArtistMatch, ConfidenceBreakdown, MatchableArtist, MatchableVenue

ARTISTS = [
    MatchableArtist(id="a1", name="The Beatles", aliases=("Beatles", "Fab Four")),
    MatchableArtist(id="a3", name="Radiohead"),
]
VENUES = [MatchableVenue(id="v1", name="Madison Square Garden", aliases=("MSG",), city="New York")]


def artist_match(entity_id: str, name: str, confidence: int = 100) -> ArtistMatch:
    return ArtistMatch(
        id=entity_id,
        name=name,
        confidence=confidence,
        breakdown=ConfidenceBreakdown(exact_match=100, fuzzy_match=100, weighted=confidence),
    )


class FlakyMatcher(EntityMatcher):
    def match_artists(self, query, artists):
        if query == "boom":
            raise RuntimeError("boom")
        return super().match_artists(query, artists)


class MatcherCacheTestCase(unittest.TestCase):
    def make_cache(self, **overrides) -> MatcherCache:
        settings = {"cleanup_interval": 0}
        settings.update(overrides)
        cache = MatcherCache(MatcherCacheConfig(**settings))
        self.addCleanup(cache.close)
        return cache


class TestPartitions(MatcherCacheTestCase):
    def test_partition_sizes(self):
        cache = self.make_cache(max_size=10)
        self.assertEqual(cache.artists.max_size, 5)
        self.assertEqual(cache.venues.max_size, 4)
        self.assertEqual(cache.aliases.max_size, 1)

    def test_partitions_never_empty(self):
        cache = self.make_cache(max_size=1)
        self.assertEqual(cache.aliases.max_size, 1)
        self.assertEqual(cache.venues.max_size, 1)

    def test_partition_ttls(self):
        cache = self.make_cache(artist_ttl=1, venue_ttl=2, alias_ttl=3)
        self.assertEqual(cache.artists.config.default_ttl, 1)
        self.assertEqual(cache.venues.config.default_ttl, 2)
        self.assertEqual(cache.aliases.config.default_ttl, 3)


class TestKeys(unittest.TestCase):
    def test_config_hash(self):
        first = config_hash(MatchConfig())
        self.assertEqual(len(first), 8)
        self.assertEqual(first, config_hash(MatchConfig()))
        self.assertNotEqual(first, config_hash(MatchConfig(min_confidence=71)))

    def test_artist_key_uses_normalized_query(self):
        config = MatchConfig()
        self.assertEqual(MatcherCache.artist_key("The Beatles", config), f"artist:beatles:{config_hash(config)}")
        self.assertEqual(
            MatcherCache.artist_key("  BEATLES ", config), MatcherCache.artist_key("The Beatles", config)
        )

    def test_venue_key_includes_city(self):
        config = MatchConfig()
        digest = config_hash(config)
        self.assertEqual(MatcherCache.venue_key("MSG", config, "New York"), f"venue:msg:new york:{digest}")
        self.assertEqual(MatcherCache.venue_key("MSG", config), f"venue:msg::{digest}")

    def test_venue_key_keeps_city_punctuation(self):
        config = MatchConfig()
        self.assertEqual(
            MatcherCache.venue_key("Pageant", config, " ST. Louis "),
            MatcherCache.venue_key("Pageant", config, "st. louis"),
        )
        self.assertNotEqual(
            MatcherCache.venue_key("Pageant", config, "St. Louis"),
            MatcherCache.venue_key("Pageant", config, "St Louis"),
        )
        self.assertNotEqual(
            MatcherCache.venue_key("Pageant", config, "The Bronx"),
            MatcherCache.venue_key("Pageant", config, "Bronx"),
        )

    def test_alias_key(self):
        self.assertEqual(MatcherCache.alias_key("resolve", "NYC", "city"), "alias:resolve:city:nyc")
        self.assertEqual(MatcherCache.alias_key("resolve", "NYC"), "alias:resolve:*:nyc")


class TestResults(MatcherCacheTestCase):
    def test_artist_round_trip(self):
        cache = self.make_cache()
        config = MatchConfig()
        self.assertIsNone(cache.get_artist_matches("beatles", config))
        cache.set_artist_matches("beatles", config, [artist_match("a1", "The Beatles")])
        cached = cache.get_artist_matches("The Beatles", config)
        self.assertEqual([match.id for match in cached], ["a1"])

    def test_returned_list_is_a_copy(self):
        cache = self.make_cache()
        config = MatchConfig()
        cache.set_artist_matches("beatles", config, [artist_match("a1", "The Beatles")])
        cache.get_artist_matches("beatles", config).clear()
        self.assertEqual(len(cache.get_artist_matches("beatles", config)), 1)

    def test_config_change_misses(self):
        cache = self.make_cache()
        cache.set_artist_matches("beatles", MatchConfig(), [artist_match("a1", "The Beatles")])
        self.assertIsNone(cache.get_artist_matches("beatles", MatchConfig(max_results=3)))

    def test_venue_city_is_part_of_key(self):
        cache = self.make_cache()
        config = MatchConfig()
        cache.set_venue_matches("msg", config, [], city_filter="New York")
        self.assertEqual(cache.get_venue_matches("msg", config, "new york"), [])
        self.assertIsNone(cache.get_venue_matches("msg", config))

    def test_alias_entries(self):
        cache = self.make_cache()
        cache.set_alias("list", "Prince", ("tafkap",), "artist")
        self.assertEqual(cache.get_alias("list", "prince", "artist"), ("tafkap",))
        self.assertIsNone(cache.get_alias("list", "prince"))
        cache.invalidate_aliases()
        self.assertIsNone(cache.get_alias("list", "prince", "artist"))


class TestInvalidation(MatcherCacheTestCase):
    def test_invalidate_by_cached_id(self):
        cache = self.make_cache()
        config = MatchConfig()
        cache.set_artist_matches("beatles", config, [artist_match("a1", "The Beatles")])
        cache.set_artist_matches("radiohead", config, [artist_match("a3", "Radiohead")])
        self.assertEqual(cache.invalidate_entity("artist", "a1"), 1)
        self.assertIsNone(cache.get_artist_matches("beatles", config))
        self.assertIsNotNone(cache.get_artist_matches("radiohead", config))

    def test_invalidate_by_key_substring(self):
        cache = self.make_cache()
        config = MatchConfig()
        cache.set_artist_matches("a1 tribute", config, [])
        self.assertEqual(cache.invalidate_entity("artist", "a1"), 1)

    def test_invalidate_only_touches_its_partition(self):
        cache = self.make_cache()
        config = MatchConfig()
        cache.set_artist_matches("beatles", config, [artist_match("x1", "The Beatles")])
        self.assertEqual(cache.invalidate_entity("venue", "x1"), 0)
        self.assertEqual(cache.invalidate_entity("artist", ""), 0)

    def test_clear(self):
        cache = self.make_cache()
        cache.set_artist_matches("beatles", MatchConfig(), [])
        cache.record_response("artist", 5.0)
        cache.clear()
        self.assertEqual(cache.utilization().overall.size, 0)
        self.assertEqual(cache.metrics().overall.samples, 0)


class TestMetrics(MatcherCacheTestCase):
    def test_moving_average(self):
        cache = self.make_cache()
        cache.record_response("artist", 10.0)
        self.assertEqual(cache.metrics().artist.average_response_ms, 10.0)
        cache.record_response("artist", 20.0)
        self.assertAlmostEqual(cache.metrics().artist.average_response_ms, 11.0)
        self.assertEqual(cache.metrics().venue.average_response_ms, 0.0)

    def test_overall_performance(self):
        cache = self.make_cache()
        for value in (10.0, 20.0, 300.0):
            cache.record_response("venue", value)
        overall = cache.metrics().overall
        self.assertEqual(overall.samples, 3)
        self.assertAlmostEqual(overall.average_response_ms, 110.0)
        self.assertAlmostEqual(overall.sub_100ms_rate, 200.0 / 3)

    def test_response_window(self):
        cache = self.make_cache()
        for _ in range(1200):
            cache.record_response("alias", 1.0)
        self.assertEqual(cache.metrics().overall.samples, 1000)

    def test_hit_rates(self):
        cache = self.make_cache()
        config = MatchConfig()
        cache.get_artist_matches("beatles", config)
        cache.set_artist_matches("beatles", config, [])
        cache.get_artist_matches("beatles", config)
        metrics = cache.metrics()
        self.assertEqual((metrics.artist.hits, metrics.artist.misses), (1, 1))
        self.assertEqual(metrics.artist.hit_rate, 50.0)
        self.assertEqual(metrics.overall.total_requests, 2)
        self.assertEqual(metrics.overall.cache_hit_rate, 50.0)

    def test_utilization(self):
        cache = self.make_cache(max_size=10)
        cache.set_artist_matches("beatles", MatchConfig(), [])
        usage = cache.utilization()
        self.assertEqual(usage.artist.size, 1)
        self.assertEqual(usage.artist.utilization, 20.0)
        self.assertEqual(usage.overall.max_size, 10)
        self.assertEqual(usage.overall.utilization, 10.0)


class TestWarming(MatcherCacheTestCase):
    def test_warm_uses_matcher_config(self):
        cache = self.make_cache()
        matcher = EntityMatcher.autocomplete()
        with self.assertLogs("concert_match.cache.matcher_cache", level="INFO"):
            warmed = cache.warm(ARTISTS, VENUES, matcher, ["Beatles", "MSG", "  "])
        self.assertEqual(warmed, 2)
        cached = cache.get_artist_matches("beatles", matcher.config)
        self.assertEqual(cached[0].id, "a1")
        self.assertEqual(cache.get_venue_matches("msg", matcher.config)[0].id, "v1")
        self.assertIsNone(cache.get_artist_matches("beatles", MatchConfig()))

    def test_warm_default_queries(self):
        cache = self.make_cache(warming_queries=["radiohead"])
        self.assertEqual(cache.warm(ARTISTS, [], EntityMatcher()), 1)
        self.assertIsNotNone(cache.get_artist_matches("radiohead", MatchConfig()))

    def test_warming_disabled(self):
        cache = self.make_cache(enable_warming=False)
        self.assertEqual(cache.warm(ARTISTS, VENUES, EntityMatcher(), ["Beatles"]), 0)
        self.assertEqual(cache.utilization().overall.size, 0)

    def test_failures_are_isolated(self):
        cache = self.make_cache()
        with self.assertLogs("concert_match.cache.matcher_cache", level="WARNING") as logs:
            warmed = cache.warm(ARTISTS, [], FlakyMatcher(), ["boom", "Radiohead"])
        self.assertEqual(warmed, 1)
        self.assertTrue(any("boom" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
