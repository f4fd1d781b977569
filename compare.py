# To run:
# python compare.py
# python compare.py calgem.pkl

'''
Background:
The same injection is reported twice - quarterly and monthly - and the two reports do
not always agree. The quarterly reports show fresh water from domestic water systems
going into disposal (WD) wells, which made no sense. Two operators said by email that
those quarterly reports were filled in wrong.

This script pulls those quarterly rows, finds the monthly rows for the same well, year
and quarter, and puts the two side by side (volume and water source). Nothing is fixed
here, the differences are written out to be checked by hand.
'''

import sys
import pandas as pd
import warnings
import water_codes
from injection_prep import SNAPSHOT_FILE, VOLUME_COLUMN, load_snapshot
from injection_report import DISPOSAL_WELL_TYPE, DOMESTIC_WATER
warnings.simplefilter(action='ignore', category=FutureWarning)

REPORT_KEY = ['api', 'year', 'quarter']
COMPARE_FILE = 'compare_quarterly_monthly.csv'
MONTHLY_ROWS_FILE = 'compare_monthly_rows.csv'
VOLUME_TOLERANCE = 1e-6


def main(args):
    snapshot_file = args[1] if len(args) > 1 else SNAPSHOT_FILE
    data = load_snapshot(snapshot_file)

    flagged_df = flag_domestic_disposal(data.q_inject)
    print('Quarterly rows with domestic water going into disposal wells:', flagged_df.shape[0])

    monthly_df = matching_monthly(flagged_df, data.m_inject)
    print('Matching monthly rows:', monthly_df.shape[0])
    monthly_df.to_csv(MONTHLY_ROWS_FILE, index=False)

    compare_df = compare_reports(flagged_df, data.m_inject)
    dfsv = (~compare_df['volume_matches']).sum()
    dfss = (~compare_df['source_matches']).sum()
    print('Well quarters compared:', compare_df.shape[0])
    print('Volume does not match:', dfsv)
    print('Water source does not match:', dfss)
    print('compare_df\n', compare_df.columns.tolist(), '\n', compare_df.head(4))
    compare_df.to_csv(COMPARE_FILE, index=False)

    return 'Done'


def flag_domestic_disposal(q_inject):
    return q_inject[(q_inject['well_type_code'] == DISPOSAL_WELL_TYPE) & (q_inject['water_source_text'] == DOMESTIC_WATER)]


def report_keys(df):
    return df[REPORT_KEY].dropna().drop_duplicates()


def matching_monthly(flagged_df, m_inject):
    keys_df = report_keys(flagged_df)
    return pd.merge(m_inject, keys_df, on=REPORT_KEY, how='inner')


def join_labels(labels):
    return '; '.join(sorted(set(label for label in labels if isinstance(label, str))))


def join_categories(labels):
    return join_labels(water_codes.source_category(label) for label in labels)


def summarize_reports(df, prefix):
    return df.groupby(REPORT_KEY).agg(**{
        prefix + '_volume_bbl': (VOLUME_COLUMN, 'sum'),
        prefix + '_sources': ('water_source_text', join_labels),
        prefix + '_source_categories': ('water_source_text', join_categories),
    }).reset_index()


def compare_reports(flagged_df, m_inject):
    q_side_df = summarize_reports(flagged_df, 'q')
    m_side_df = summarize_reports(matching_monthly(flagged_df, m_inject), 'm')

    # keep the quarterly rows that have no monthly report at all, they show up as not matching
    compare_df = pd.merge(q_side_df, m_side_df, on=REPORT_KEY, how='left')
    compare_df['volume_matches'] = (compare_df['q_volume_bbl'] - compare_df['m_volume_bbl']).abs() <= VOLUME_TOLERANCE
    compare_df['source_matches'] = compare_df['q_source_categories'] == compare_df['m_source_categories']
    return compare_df


if __name__ == "__main__":
    args = sys.argv
    main(args)
