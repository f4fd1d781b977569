# To run:
# python injection_report.py
# python injection_report.py calgem.pkl
# reads the snapshot saved by injection_prep.py and writes one csv per result table into report_tables/

'''
Background:
The tables behind the story. Every table follows the same recipe:
1) filter - drop the offshore wells (county name has "Offshore" in it) and the disposal
   wells (well type WD), sometimes keep only one water source or suitability bucket
2) group by some of county (Kern vs everything else), year, operator, water source,
   suitability
3) add up the injected volume and turn barrels into gallons (x 42)
4) sometimes turn the long table into a wide one (one column per year, for example).
   A missing cell means nothing was reported, so it is filled with 0
5) sometimes add the percent of the total. The percent is worked out on the unrounded
   gallons, only the percent itself is rounded (2 places)

Gallons are only rounded when the tables are written out.
'''

import os
import sys
import pandas as pd
import warnings
import water_codes
from injection_prep import SNAPSHOT_FILE, VOLUME_COLUMN, load_snapshot
warnings.simplefilter(action='ignore', category=FutureWarning)

GALLONS_PER_BARREL = 42
KEY_COUNTIES = ['Kern']
OTHER_COUNTY = 'Other'
OFFSHORE = 'Offshore'
DISPOSAL_WELL_TYPE = 'WD'
DOMESTIC_WATER = 'Domestic Water System'
MISSING_KEY = 'Missing'
REPORT_DIR = 'report_tables'


def main(args):
    snapshot_file = args[1] if len(args) > 1 else SNAPSHOT_FILE

    print('Loading snapshot', snapshot_file)
    data = load_snapshot(snapshot_file)

    print('Building report tables')
    tables = build_reports(data)
    for name, table in tables.items():
        print('\n', name, '\n', table.head(10))

    write_reports(tables, REPORT_DIR)
    print('DONE')
    return 'done'


def to_gallons(bbl):
    return bbl * GALLONS_PER_BARREL


def county_bucket(counties):
    return counties.where(counties.isin(KEY_COUNTIES), OTHER_COUNTY)


def filter_injection(df, exclude_offshore=True, exclude_disposal=True, water_source=None, suitability=None):
    keep = pd.Series(True, index=df.index)
    if exclude_offshore:
        offshore = df['county'].astype('string').str.contains(OFFSHORE, case=False, na=False)
        keep = keep & ~offshore.astype(bool)
    if exclude_disposal:
        keep = keep & (df['well_type_code'] != DISPOSAL_WELL_TYPE)
    if water_source is not None:
        keep = keep & (df['water_source_text'] == water_source)
    if suitability is not None:
        keep = keep & (df['suitability'] == suitability)
    return df[keep]


def sum_gallons(df, by):
    df = df.copy()
    df['gallons'] = to_gallons(df[VOLUME_COLUMN])
    # missing volumes are skipped, missing keys stay as their own group
    return df.groupby(by, dropna=False)['gallons'].sum().reset_index()


def add_percent(df, value_col='gallons', within=None, percent_col='percent'):
    df = df.copy()
    if within:
        totals = df.groupby(within, dropna=False)[value_col].transform('sum')
    else:
        totals = df[value_col].sum()
    df[percent_col] = (df[value_col] / totals * 100).round(2)
    return df


def widen(df, index, columns, values='gallons'):
    df = df.copy()
    for key in [index, columns]:
        if not pd.api.types.is_numeric_dtype(df[key]):
            df[key] = df[key].fillna(MISSING_KEY)

    wide = df.groupby([index, columns])[values].sum().unstack(columns, fill_value=0)
    wide['total'] = wide.sum(axis=1)
    wide = wide.reset_index()
    wide.columns.name = None
    return wide


def round_for_display(df, decimals=0):
    df = df.copy()
    for col in df.select_dtypes('number').columns:
        if str(col).startswith('percent'):
            continue
        df[col] = df[col].round(decimals)
    return df


def gallons_by_source_year(data):
    df = filter_injection(data.q_inject)
    long_df = sum_gallons(df, ['water_source_text', 'year'])
    wide_df = widen(long_df, 'water_source_text', 'year')
    return wide_df.sort_values('total', ascending=False, ignore_index=True)


def suitability_by_county(data):
    df = filter_injection(data.q_inject).copy()
    df['county_bucket'] = county_bucket(df['county'])
    long_df = sum_gallons(df, ['county_bucket', 'suitability'])
    return add_percent(long_df, within=['county_bucket'])


def suitable_by_county(data):
    df = filter_injection(data.q_inject, suitability=water_codes.SUITABLE).copy()
    df['county_bucket'] = county_bucket(df['county'])
    long_df = sum_gallons(df, ['county_bucket'])
    return add_percent(long_df)


def suitability_by_year(data):
    df = filter_injection(data.q_inject)
    long_df = sum_gallons(df, ['year', 'suitability'])
    wide_df = widen(long_df, 'year', 'suitability')

    # every bucket gets a column, even in a year where nothing fell in it
    for bucket in water_codes.SUITABILITY_BUCKETS:
        if bucket not in wide_df.columns:
            wide_df[bucket] = 0
    for bucket in water_codes.SUITABILITY_BUCKETS:
        wide_df['percent_' + bucket] = (wide_df[bucket] / wide_df['total'] * 100).round(2)

    columns = ['year'] + water_codes.SUITABILITY_BUCKETS + ['total']
    columns += ['percent_' + bucket for bucket in water_codes.SUITABILITY_BUCKETS]
    return wide_df[columns]


def suitable_by_operator(data):
    df = filter_injection(data.q_inject, suitability=water_codes.SUITABLE)
    long_df = sum_gallons(df, ['operator_name'])
    long_df = add_percent(long_df)
    return long_df.sort_values('gallons', ascending=False, ignore_index=True)


def domestic_by_source_name(data):
    df = filter_injection(data.q_inject, water_source=DOMESTIC_WATER).copy()
    df['source_name'] = water_codes.consolidate_source_names(df['water_source_name'])
    long_df = sum_gallons(df, ['source_name', 'year'])
    wide_df = widen(long_df, 'source_name', 'year')
    return wide_df.sort_values('total', ascending=False, ignore_index=True)


def operator_by_source(data):
    df = filter_injection(data.q_inject)
    long_df = sum_gallons(df, ['operator_name', 'water_source_text'])
    wide_df = widen(long_df, 'operator_name', 'water_source_text')
    return wide_df.sort_values('total', ascending=False, ignore_index=True)


def monthly_gallons_by_kind(data):
    df = filter_injection(data.m_inject)
    long_df = sum_gallons(df, ['water_kind_text', 'year'])
    wide_df = widen(long_df, 'water_kind_text', 'year')
    return wide_df.sort_values('total', ascending=False, ignore_index=True)


REPORTS = {
    'gallons_by_source_year': gallons_by_source_year,
    'suitability_by_county': suitability_by_county,
    'suitable_by_county': suitable_by_county,
    'suitability_by_year': suitability_by_year,
    'suitable_by_operator': suitable_by_operator,
    'domestic_by_source_name': domestic_by_source_name,
    'operator_by_source': operator_by_source,
    'monthly_gallons_by_kind': monthly_gallons_by_kind,
}


def build_reports(data):
    tables = {}
    for name, report in REPORTS.items():
        tables[name] = report(data)
    return tables


def write_reports(tables, out_dir=REPORT_DIR):
    os.makedirs(out_dir, exist_ok=True)
    for name, table in tables.items():
        path = os.path.join(out_dir, name + '.csv')
        round_for_display(table).to_csv(path, index=False)
        print('Wrote', path)


if __name__ == "__main__":
    args = sys.argv
    main(args)
