import itertools

import pandas as pd
import pytest

import water_codes


def test_label_codes_known_codes():
    codes = pd.Series(['01', '03', '11'])
    labels = water_codes.label_codes(codes, water_codes.QUARTERLY_WATER_SOURCE)
    assert labels.tolist() == ['Oil or Gas Well - In Field', 'Domestic Water System', 'Class II Recycled Drilling']


def test_label_codes_unknown_and_missing_get_sentinel():
    codes = pd.Series(['12', None, '', 'abc', '1'])
    labels = water_codes.label_codes(codes, water_codes.QUARTERLY_WATER_SOURCE)
    assert labels.tolist() == [water_codes.MISSING_LABEL] * 5


def test_label_codes_strips_spaces():
    codes = pd.Series([' 3 ', '2'])
    labels = water_codes.label_codes(codes, water_codes.MONTHLY_WATER_KIND)
    assert labels.tolist() == ['Chemical Mixture', 'Fresh']


def test_monthly_codes_do_not_use_leading_zeros():
    labels = water_codes.label_codes(pd.Series(['03', '3']), water_codes.MONTHLY_WATER_SOURCE)
    assert labels.tolist() == [water_codes.MISSING_LABEL, 'Domestic Water System']


def _flag_frame(suitable, treatments):
    row = {water_codes.SUITABILITY_COLUMN: suitable}
    row.update(dict(zip(water_codes.TREATMENT_COLUMNS, treatments)))
    return pd.DataFrame([row])


@pytest.mark.parametrize('suitable, treatments, expected', [
    ('Y', ['N', 'N', 'N', 'N', 'N'], 'yes'),
    ('Y', ['Y', 'N', 'N', 'N', 'N'], 'yes'),
    ('N', ['N', 'N', 'Y', 'N', 'N'], 'no_treated'),
    ('n', ['N', 'N', 'N', 'N', 'true'], 'no_treated'),
    ('N', ['N', 'N', 'N', 'N', 'N'], 'no_untreated'),
    (None, [None, None, None, None, None], 'no_untreated'),
    ('yes', [None, 'N', None, 'N', None], 'yes'),
])
def test_classify_suitability(suitable, treatments, expected):
    result = water_codes.classify_suitability(_flag_frame(suitable, treatments))
    assert result.tolist() == [expected]


def test_classify_suitability_is_total_and_exclusive():
    values = ['Y', 'N', None]
    rows = []
    for suitable in values:
        for treatments in itertools.product(values, repeat=5):
            row = {water_codes.SUITABILITY_COLUMN: suitable}
            row.update(dict(zip(water_codes.TREATMENT_COLUMNS, treatments)))
            rows.append(row)
    df = pd.DataFrame(rows)

    result = water_codes.classify_suitability(df)

    assert len(result) == len(df)
    assert result.isin(water_codes.SUITABILITY_BUCKETS).all()
    counts = result.value_counts()
    assert counts.sum() == len(df)
    assert counts[water_codes.SUITABLE] == 3 ** 5


def test_treatment_token():
    df = _flag_frame('N', ['Y', 'N', None, 'N', ' Y'])
    assert water_codes.treatment_token(df).tolist() == ['Y_N_NA_N_Y']


def test_consolidate_source_name_variants():
    names = ['CA Aqueduct', 'california AQUEDUCT water', 'State Water Project', 'WKWD', 'West Kern W.D.']
    result = [water_codes.consolidate_source_name(name) for name in names]
    assert result == [
        'California Aqueduct',
        'California Aqueduct',
        'California Aqueduct',
        'West Kern Water District',
        'West Kern Water District',
    ]


def test_consolidate_source_name_first_rule_wins():
    # matches both the aqueduct and the lost hills rules
    assert water_codes.consolidate_source_name('Aqueduct via Lost Hills WD') == 'California Aqueduct'


def test_consolidate_source_names_passes_unmapped_through():
    names = pd.Series(['City of Taft', None, 'Aqueduct'])
    result = water_codes.consolidate_source_names(names)
    assert result[0] == 'City of Taft'
    assert pd.isnull(result[1])
    assert result[2] == 'California Aqueduct'


def test_source_category():
    assert water_codes.source_category('Oil or Gas Well - In Field') == 'Oil or Gas Well'
    assert water_codes.source_category('Oil or Gas Well - Other Field/Operator') == 'Oil or Gas Well'
    assert water_codes.source_category('Domestic Water System') == 'Domestic Water System'
    assert water_codes.source_category(None) is None
