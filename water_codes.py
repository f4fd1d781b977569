'''
Background:
Lookup tables for the CalGEM injection reports and the small rules used to clean
up water source information before grouping.

The monthly and quarterly reports use different code lists for the water source.
Codes come in as text (every column is read as a string), so the tables are keyed
by the exact strings found in the extracts ("01" in quarterly, "1" in monthly).
Anything not in a table gets the Error/Missing label - the extracts are known to
have out of range and blank codes.

Water suitability:
The quarterly report says whether the injected water was suitable for domestic or
irrigation use, and which treatment methods (if any) were applied.
yes          -> suitable as reported
no_treated   -> not suitable, but at least one treatment method was applied
no_untreated -> not suitable and no treatment
'''

import pandas as pd

MISSING_LABEL = 'Error/Missing'

MONTHLY_WATER_SOURCE = {
    '0': 'Not Applicable',
    '1': 'Oil or Gas Well',
    '2': 'Water Source Well',
    '3': 'Domestic Water System',
    '4': 'Surface Water',
    '5': 'Industrial Waste',
    '6': 'Domestic Waste',
    '7': 'Other',
}

MONTHLY_WATER_KIND = {
    '0': 'Not Applicable',
    '1': 'Saline',
    '2': 'Fresh',
    '3': 'Chemical Mixture',
    '4': 'Other',
}

QUARTERLY_WATER_SOURCE = {
    '01': 'Oil or Gas Well - In Field',
    '02': 'Water Source Well',
    '03': 'Domestic Water System',
    '04': 'Surface Water',
    '05': 'Industrial Waste',
    '06': 'Domestic Waste',
    '07': 'Other',
    '08': 'Oil or Gas Well - Other Field/Operator',
    '09': 'Well Stimulation Treatment',
    '10': 'Other Class II Recycled',
    '11': 'Class II Recycled Drilling',
}

SUITABILITY_COLUMN = 'suitable_water'
TREATMENT_COLUMNS = [
    'treatment_filtration',
    'treatment_softening',
    'treatment_oil_removal',
    'treatment_reverse_osmosis',
    'treatment_other',
]
SUITABLE = 'yes'
UNSUITABLE_TREATED = 'no_treated'
UNSUITABLE_UNTREATED = 'no_untreated'
SUITABILITY_BUCKETS = [SUITABLE, UNSUITABLE_TREATED, UNSUITABLE_UNTREATED]

AFFIRMATIVE = ['Y', 'YES', 'T', 'TRUE', '1']

# checked top to bottom, first match wins
# the names are typed in by the operators, so the same source shows up many ways
SOURCE_NAME_RULES = [
    ('aqueduct', 'California Aqueduct'),
    ('state water project', 'California Aqueduct'),
    ('swp', 'California Aqueduct'),
    ('friant', 'Friant-Kern Canal'),
    ('west kern', 'West Kern Water District'),
    ('wkwd', 'West Kern Water District'),
    ('cawelo', 'Cawelo Water District'),
    ('north kern', 'North Kern Water Storage District'),
    ('belridge', 'Belridge Water Storage District'),
    ('lost hills', 'Lost Hills Water District'),
    ('kern county water', 'Kern County Water Agency'),
    ('kcwa', 'Kern County Water Agency'),
]


def label_codes(codes, table):
    # codes are strings, strip the stray spaces the exports carry
    cleaned = codes.astype('string').str.strip()
    return cleaned.map(table).fillna(MISSING_LABEL).astype(object)


def is_affirmative(flags):
    cleaned = flags.astype('string').str.strip().str.upper()
    return cleaned.isin(AFFIRMATIVE).fillna(False).astype(bool)


def treatment_token(df):
    parts = [df[col].astype('string').str.strip().fillna('NA') for col in TREATMENT_COLUMNS]
    token = parts[0]
    for part in parts[1:]:
        token = token + '_' + part
    return token.astype(object)


def classify_suitability(df):
    suitable = is_affirmative(df[SUITABILITY_COLUMN])
    treated = pd.Series(False, index=df.index)
    for col in TREATMENT_COLUMNS:
        treated = treated | is_affirmative(df[col])

    result = pd.Series(UNSUITABLE_UNTREATED, index=df.index, dtype=object)
    result[treated] = UNSUITABLE_TREATED
    result[suitable] = SUITABLE
    return result


def consolidate_source_name(name):
    if not isinstance(name, str):
        return name
    lowered = name.lower()
    for pattern, canonical in SOURCE_NAME_RULES:
        if pattern in lowered:
            return canonical
    return name


def consolidate_source_names(names):
    return names.apply(consolidate_source_name)


def source_category(label):
    '''Reduce a water source label to the wording both report streams share.

    The quarterly list splits oil and gas wells into "In Field" and
    "Other Field/Operator"; the monthly list does not.
    '''
    if not isinstance(label, str):
        return label
    return label.split(' - ')[0]
