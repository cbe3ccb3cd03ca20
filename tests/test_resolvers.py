import pytest

from services.pairing import flavor_compatibility_score, origin_affinity_score, roast_texture_score


class TestFlavorCompatibility:
    def test_every_listed_pair_scores_full(self, tables):
        for anchor, compatible in tables.flavor_compatibility.items():
            for candidate in compatible:
                assert flavor_compatibility_score([anchor], [candidate], tables) == 1.0, (anchor, candidate)

    def test_lookup_is_directed(self, tables):
        assert flavor_compatibility_score(["hazelnut"], ["vanilla"], tables) == 1.0
        assert flavor_compatibility_score(["vanilla"], ["hazelnut"], tables) == 0.3

    def test_identical_token_scores_below_compatible(self, tables):
        identical = flavor_compatibility_score(["chocolate"], ["chocolate"], tables)
        compatible = flavor_compatibility_score(["chocolate"], ["vanilla"], tables)
        assert identical == 0.8
        assert compatible == 1.0

    def test_identical_unknown_token_still_matches(self, tables):
        assert flavor_compatibility_score(["matcha"], ["matcha"], tables) == 0.8

    def test_missing_side_is_neutral(self, tables):
        assert flavor_compatibility_score([], ["vanilla"], tables) == 0.5
        assert flavor_compatibility_score(["chocolate"], [], tables) == 0.5

    def test_no_overlap(self, tables):
        assert flavor_compatibility_score(["chocolate"], ["lemon"], tables) == 0.3
        assert flavor_compatibility_score(["matcha"], ["sesame"], tables) == 0.3

    def test_normalised_by_longer_side(self, tables):
        score = flavor_compatibility_score(["chocolate", "matcha"], ["vanilla", "sesame"], tables)
        assert score == pytest.approx(0.5)

    def test_capped_at_one(self, tables):
        assert flavor_compatibility_score(["chocolate", "smoky"], ["vanilla"], tables) == 1.0


class TestOriginAffinity:
    def test_each_origin_fully_covered(self, tables):
        for origin, expected in tables.origin_affinity.items():
            assert origin_affinity_score(origin, sorted(expected), tables) == 1.0, origin

    def test_partial_coverage(self, tables):
        score = origin_affinity_score(" Brazil ", ["almond", "caramel"], tables)
        assert score == pytest.approx(2 / 6)

    def test_known_origin_without_matches(self, tables):
        assert origin_affinity_score("brazil", ["lemon"], tables) == 0.0

    def test_unknown_or_missing_is_neutral(self, tables):
        assert origin_affinity_score("Narnia", ["almond"], tables) == 0.5
        assert origin_affinity_score(None, ["almond"], tables) == 0.5
        assert origin_affinity_score("brazil", [], tables) == 0.5


class TestRoastTexture:
    def test_dark_family(self, tables):
        assert roast_texture_score("dark", ["dense", "rich"], tables) == 1.0
        assert roast_texture_score("Medium-Dark", ["dense", "airy"], tables) == 0.5
        assert roast_texture_score("Espresso", ["airy"], tables) == 0.3

    def test_light_family(self, tables):
        assert roast_texture_score("light", ["flaky", "dense"], tables) == 0.5
        assert roast_texture_score("Filter", ["fudgy"], tables) == 0.3

    def test_every_listed_texture_fits_its_roast(self, tables):
        for texture in tables.dark_roast_textures:
            assert roast_texture_score("dark", [texture], tables) == 1.0
        for texture in tables.light_roast_textures:
            assert roast_texture_score("light", [texture], tables) == 1.0

    def test_other_roasts_fall_back(self, tables):
        assert roast_texture_score("medium", ["dense"], tables) == 0.7
        assert roast_texture_score("unknown", ["dense"], tables) == 0.7

    def test_missing_side_is_neutral(self, tables):
        assert roast_texture_score(None, ["dense"], tables) == 0.5
        assert roast_texture_score("dark", [], tables) == 0.5
