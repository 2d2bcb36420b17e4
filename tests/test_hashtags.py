from community_feed.services.hashtags import extract_hashtags


def test_extract_hashtags_preserves_order_and_duplicates():
    assert extract_hashtags("Praying today #Hope #Faith #Hope") == ["Hope", "Faith", "Hope"]


def test_extract_hashtags_is_idempotent_over_stored_body():
    body = "Sunday service #Worship then lunch #fellowship_2024"
    first = extract_hashtags(body)
    assert first == ["Worship", "fellowship_2024"]
    assert extract_hashtags(body) == first


def test_extract_hashtags_ignores_bare_hash_and_punctuation():
    assert extract_hashtags("# not a tag, ## neither, #ok! #also.") == ["ok", "also"]


def test_extract_hashtags_handles_empty_input():
    assert extract_hashtags("") == []
    assert extract_hashtags(None) == []
