"""
Unit tests for the name/code search index.
"""

from conftest import make_feature
from thaimap.engine.models import AdminLevel, FeatureCollection
from thaimap.engine.search import SearchIndex, normalize_search_term


def _bangkok_index():
    bangkok = make_feature(
        AdminLevel.PROVINCES,
        {"pro_code": "10", "pro_th": "กรุงเทพมหานคร", "pro_en": "Bangkok", "area_sqkm": 1568.7},
    )
    index = SearchIndex()
    index.add_collection(FeatureCollection(level=AdminLevel.PROVINCES, features=[bangkok]))
    return index, bangkok


def test_normalize_search_term():
    assert normalize_search_term("  Chiang Mai ") == "chiang mai"
    assert normalize_search_term(normalize_search_term(" X ")) == "x"


def test_empty_query_returns_nothing():
    index, _ = _bangkok_index()
    assert index.search("") == []
    assert index.search("  ") == []


def test_single_province_lookups():
    index, bangkok = _bangkok_index()
    for query in ("bangkok", "BANGKOK", " Bangkok ", "กรุงเทพ", "10"):
        results = index.search(query)
        assert len(results) == 1, query
        assert results[0].feature is bangkok
        assert results[0].level == AdminLevel.PROVINCES
        assert results[0].display_name == "กรุงเทพมหานคร (Bangkok)"


def test_no_match():
    index, _ = _bangkok_index()
    assert index.search("phuket") == []


def test_feature_matching_two_terms_appears_once():
    town = make_feature(AdminLevel.PROVINCES, {"pro_code": "99", "pro_th": "Sample Town", "pro_en": "Sample City"})
    index = SearchIndex()
    index.add_feature(town)
    results = index.search("sample")
    assert len(results) == 1
    assert results[0].feature is town


def test_exact_matches_come_before_partial_matches():
    index = SearchIndex()
    partial = make_feature(AdminLevel.PROVINCES, {"pro_code": "1", "pro_en": "Nakhon Pathom"})
    exact = make_feature(AdminLevel.PROVINCES, {"pro_code": "2", "pro_en": "Nakhon"})
    index.add_feature(partial)
    index.add_feature(exact)

    results = index.search("nakhon")
    assert [r.feature.feature_id for r in results] == ["2", "1"]


def test_partial_matches_keep_insertion_order():
    index = SearchIndex()
    for code, name in (("3", "Mueang C"), ("1", "Mueang A"), ("2", "Mueang B")):
        index.add_feature(make_feature(AdminLevel.DISTRICTS, {"amp_code": code, "amp_en": name}))
    assert [r.feature.feature_id for r in index.search("mueang")] == ["3", "1", "2"]


def test_limit_truncates_results():
    index = SearchIndex()
    for i in range(30):
        index.add_feature(make_feature(AdminLevel.SUBDISTRICTS, {"tam_code": f"t{i}", "tam_en": f"Tambon {i}"}))
    assert len(index.search("tambon")) == 20
    assert len(index.search("tambon", limit=5)) == 5
    assert [r.feature.feature_id for r in index.search("tambon", limit=3)] == ["t0", "t1", "t2"]
    assert index.search("tambon", limit=0) == []


def test_parent_names_surface_children():
    index = SearchIndex()
    district = make_feature(
        AdminLevel.DISTRICTS,
        {"amp_code": "5001", "amp_th": "เมืองเชียงใหม่", "pro_th": "เชียงใหม่", "pro_en": "Chiang Mai"},
    )
    index.add_feature(district)
    results = index.search("chiang mai")
    assert len(results) == 1
    assert results[0].display_name == "เมืองเชียงใหม่, เชียงใหม่"


def test_same_properties_on_different_levels_are_distinct():
    index = SearchIndex()
    index.add_feature(make_feature(AdminLevel.REGION_ROYIN, {"reg_royin": "ภาคเหนือ"}))
    index.add_feature(make_feature(AdminLevel.REGION_NESDB, {"reg_royin": "ภาคเหนือ"}))
    # identical level + properties collapse to one result
    index.add_feature(make_feature(AdminLevel.REGION_ROYIN, {"reg_royin": "ภาคเหนือ"}))
    results = index.search("ภาคเหนือ")
    assert [r.level for r in results] == [AdminLevel.REGION_ROYIN, AdminLevel.REGION_NESDB]


def test_clear():
    index, _ = _bangkok_index()
    assert len(index) == 3
    index.clear()
    assert len(index) == 0
    assert index.search("bangkok") == []


def test_features_differing_only_in_extra_properties_are_distinct():
    index = SearchIndex()
    index.add_feature(make_feature(AdminLevel.REGION_ROYIN, {"reg_royin": "ภาคกลาง", "id": 1}))
    index.add_feature(make_feature(AdminLevel.REGION_ROYIN, {"reg_royin": "ภาคกลาง", "id": 2}))
    results = index.search("ภาคกลาง")
    assert len(results) == 2
    assert [r.feature.to_geojson()["properties"]["id"] for r in results] == [1, 2]


def test_search_result_serialization():
    index, bangkok = _bangkok_index()
    result = index.search("bangkok")[0]
    data = result.model_dump(mode="json")
    assert data["level"] == "provinces"
    assert data["feature_id"] == "10"
    assert data["display_name"] == "กรุงเทพมหานคร (Bangkok)"
    assert data["feature"]["properties"]["pro_en"] == "Bangkok"
