"""
Tests for asset lookup by tag or item name
"""

from app.data.core.constants import ItemType
from app.services.core.asset_search_service import AssetSearchService


def tags(results):
    return [asset.tag for asset in results]


def test_search_matches_tag_and_item_name(world, factory):
    drill = factory.item('Cordless Drill', item_type=ItemType.ASSET)
    factory.asset(world['vacuum'], 'VAC-002', location=world['store'])
    factory.asset(world['vacuum'], 'VAC-001', location=world['store'])
    factory.asset(drill, 'DRL-001')

    assert tags(AssetSearchService.search('vac')) == ['VAC-001', 'VAC-002']
    assert tags(AssetSearchService.search('CLEANER')) == ['VAC-001', 'VAC-002']
    assert tags(AssetSearchService.search('drill')) == ['DRL-001']
    assert tags(AssetSearchService.search('001')) == ['DRL-001', 'VAC-001']


def test_blank_query_returns_nothing(world, factory):
    factory.asset(world['vacuum'], 'VAC-001')

    assert AssetSearchService.search('') == []
    assert AssetSearchService.search('   ') == []
    assert AssetSearchService.search(None) == []


def test_item_type_filter(world, factory):
    factory.asset(world['vacuum'], 'VAC-001')

    assert tags(AssetSearchService.search('VAC', item_type=ItemType.ASSET)) == ['VAC-001']
    assert AssetSearchService.search('VAC', item_type=ItemType.STOCK) == []


def test_results_are_capped(world, factory):
    for number in range(AssetSearchService.MAX_RESULTS + 5):
        factory.asset(world['vacuum'], f"VAC-{number:03d}")

    results = AssetSearchService.search('VAC')
    assert len(results) == AssetSearchService.MAX_RESULTS
    assert results[0].tag == 'VAC-000'


def test_serialize(world, factory):
    asset = factory.asset(world['vacuum'], 'VAC-001', location=world['store'])

    assert AssetSearchService.serialize(asset) == {
        'id': asset.id,
        'tag': 'VAC-001',
        'item_id': world['vacuum'].id,
        'item_name': 'Vacuum Cleaner',
        'condition': 'GOOD',
        'current_location_name': 'Main Store',
    }
