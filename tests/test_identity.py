"""Tests for global identifiers and the domain store."""

import pytest

from typed_schema.errors import NotFoundError
from typed_schema.identity import GlobalIdentity, natural_key, to_global_id
from typed_schema.jazz import build_schema, models, new_store, seed_data
from typed_schema.store import DomainStore


@pytest.fixture
def store():
    return new_store()


@pytest.fixture
def identity(store):
    """Identity bound to the demo schema's registry."""
    return build_schema().global_identity(store)


class TestDomainStore:
    """Tests for the in-memory store."""

    def test_seeded_partitions(self, store):
        assert store.partitions == ["Instrument", "Ensemble"]
        assert store.count("Instrument") == 6
        assert "Ensemble" in store

    def test_select_returns_copy(self, store):
        records = store.select("Instrument")
        records.clear()
        assert store.count("Instrument") == 6

    def test_select_unknown_partition(self, store):
        assert store.select("Venue") == []
        assert not store.has_partition("Venue")

    def test_push_creates_partition(self, store):
        record = store.push("Musician", models.Musician("Victor Wooten"))
        assert store.select("Musician") == [record]

    def test_push_preserves_order(self, store):
        store.push("Ensemble", models.Ensemble("Spyro Gyra"))
        names = [e.name for e in store.select("Ensemble")]
        assert names == ["Bela Fleck and the Flecktones", "Spyro Gyra"]

    def test_reset_reloads_seed(self, store):
        store.push("Ensemble", models.Ensemble("Spyro Gyra"))
        store.reset()
        assert store.count("Ensemble") == 1

    def test_seed_is_fresh_each_time(self):
        assert seed_data()["Ensemble"][0] is not seed_data()["Ensemble"][0]

    def test_empty_store(self):
        assert DomainStore().partitions == []


class TestGlobalIds:
    """Tests for encoding and finding global ids."""

    def test_encode(self):
        ensemble = models.Ensemble("Bela Fleck and the Flecktones")
        assert to_global_id(ensemble) == "Ensemble/Bela Fleck and the Flecktones"
        assert to_global_id(ensemble, ":") == "Ensemble:Bela Fleck and the Flecktones"

    def test_natural_key_of_mapping(self):
        assert natural_key({"name": "Banjo"}) == "Banjo"

    def test_round_trip(self, store, identity):
        for record in store.select("Instrument"):
            assert identity.find(identity.to_id(record)) is record

    def test_decode(self, identity):
        assert identity.decode("Instrument/Drum Kit") == ("Instrument", "Drum Kit")

    @pytest.mark.parametrize("bad_id", ["Instrument", "", "/Banjo", None, 42])
    def test_malformed(self, identity, bad_id):
        with pytest.raises(NotFoundError):
            identity.find(bad_id)

    def test_absent_partition(self, store):
        bare = GlobalIdentity(store)
        with pytest.raises(NotFoundError):
            bare.find("Musician/Victor Wooten")

    def test_missing_key(self, identity):
        with pytest.raises(NotFoundError) as excinfo:
            identity.find("Instrument/Kazoo")
        assert excinfo.value.global_id == "Instrument/Kazoo"

    def test_type_without_capability(self, store, identity):
        store.push("Query", {"name": "root"})
        with pytest.raises(NotFoundError):
            identity.find("Query/root")

    def test_pushed_record_is_findable(self, store, identity):
        record = store.push("Ensemble", models.Ensemble("Spyro Gyra"))
        assert identity.find("Ensemble/Spyro Gyra") is record
