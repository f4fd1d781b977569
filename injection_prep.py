# To run:
# python injection_prep.py locations
# python injection_prep.py prep
# when locations, will fetch the well locations from the CalGEM GIS service and cache them to a csv
# when prep, will read the yearly csvs, join the wells and locations, and save the snapshot used by the reports

'''
Background for data ETL

GETTING THE DATA
CalGEM (California Geologic Energy Management Division) publishes the well and injection
data as yearly SQL Server databases. Each year was restored and the three tables we need
were exported to csv, one folder per year:

sql_server_csv/2018/dbo.2018CaliforniaOilAndGasWellQuarterlyInjection.csv
sql_server_csv/2018/dbo.2018CaliforniaOilAndGasWellMonthlyInjection.csv
sql_server_csv/2018/dbo.2018CaliforniaOilAndGasWells.csv
... same for 2019, 2020, 2021

All three are needed for every year. If one is missing the run stops, a partial year
would quietly undercount the totals.

Every column is read as text. The codes are stored with leading zeros in the quarterly
file ("01") and without them in the monthly file ("1"), and some volumes are not numbers,
so the types are set afterwards (anything that will not convert becomes missing).

The wells table has one row per well per year with the operator and county. It is
joined to both injection tables on api + year. Locations (lat, lon, field name) come
from the GIS service, see well_locations.py.

Known problem in the data: two operators confirmed by email that some quarterly reports
have the wrong water source / disposition. These are NOT changed here, compare.py shows
them next to the monthly reports instead.
'''

import os
import re
import sys
import collections
import pandas as pd
import warnings
import water_codes
import well_locations
warnings.simplefilter(action='ignore', category=FutureWarning)

DATA_DIR = 'sql_server_csv'
YEARS = range(2018, 2022)
SNAPSHOT_FILE = 'calgem.pkl'

TABLES = {
    'quarterly': 'WellQuarterlyInjection',
    'monthly': 'WellMonthlyInjection',
    'wells': 'Wells',
}
RENAMES = {
    'quarterly': {'api_number': 'api'},
    'monthly': {'api_number': 'api'},
    'wells': {'operatorcode': 'operator_code'},
}
MONTHLY_NUMERIC = [
    'steam_water_injected',
    'gas_air_injected',
    'days_injecting',
    'surface_injection_pressure',
    'casing_injection_pressure',
]
VOLUME_COLUMN = 'steam_water_injected_bbl'

InjectionData = collections.namedtuple('InjectionData', ['q_inject', 'm_inject', 'wells'])


def main(args):
    mode = args[1] if len(args) > 1 else ''

    if mode == 'locations':
        well_locations.load_well_locations(well_locations.WELLS_LOCATIONS_FILE)
        print('DONE')
    elif mode == 'prep':
        data = run_prep()
        print('q_inject\n', data.q_inject.columns.tolist(), '\n', data.q_inject.head(4))
        print('m_inject\n', data.m_inject.columns.tolist(), '\n', data.m_inject.head(4))
        print('DONE')
    else:
        print('You forgot your arguments when you called the program (locations or prep).')

    return 'done'


def run_prep(data_dir=DATA_DIR, years=YEARS, locations_file=well_locations.WELLS_LOCATIONS_FILE,
             snapshot_file=SNAPSHOT_FILE):
    locations_df = well_locations.load_well_locations(locations_file)

    q_inject, m_inject, a_wells = load_extracts(data_dir, years)

    print('Setting data types and labels')
    q_inject = type_quarterly(q_inject)
    m_inject = type_monthly(m_inject)

    print('Join injection data to wells and locations')
    registry_df = well_locations.prepare_registry(a_wells, locations_df)
    q_inject = well_locations.join_registry(q_inject, registry_df)
    m_inject = well_locations.join_registry(m_inject, registry_df)

    data = InjectionData(q_inject=q_inject, m_inject=m_inject, wells=registry_df)
    save_snapshot(data, snapshot_file)
    return data


def data_file_path(data_dir, kind, year):
    filename = 'dbo.{}CaliforniaOilAndGas{}.csv'.format(year, TABLES[kind])
    return os.path.join(data_dir, str(year), filename)


def check_input_files(data_dir, years):
    missing = []
    for year in years:
        for kind in TABLES:
            path = data_file_path(data_dir, kind, year)
            if not os.path.exists(path):
                missing.append(path)
    if missing:
        raise FileNotFoundError('Missing input files, every year needs all three tables: {}'.format(missing))


def clean_name(name):
    name = str(name).strip()
    # APINumber -> API_Number, operatorName -> operator_Name
    name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
    name = re.sub(r'[^0-9a-zA-Z]+', '_', name)
    name = name.strip('_').lower()
    return name or 'x'


def clean_names(columns):
    cleaned = []
    seen = {}
    for column in columns:
        name = clean_name(column)
        if name in seen:
            seen[name] += 1
            name = '{}_{}'.format(name, seen[name])
        else:
            seen[name] = 1
        cleaned.append(name)
    return cleaned


def read_year_file(path, year, renames=None):
    df = pd.read_csv(path, dtype=str)
    df.columns = clean_names(df.columns)
    if renames:
        df.rename(columns=renames, inplace=True)
    df['year'] = year
    return df.drop_duplicates()


def load_extracts(data_dir=DATA_DIR, years=YEARS):
    check_input_files(data_dir, years)

    frames = {kind: [] for kind in TABLES}
    for year in years:
        for kind in TABLES:
            path = data_file_path(data_dir, kind, year)
            df = read_year_file(path, year, RENAMES[kind])
            print('Read', path, 'rows:', df.shape[0])
            frames[kind].append(df)

    q_inject = pd.concat(frames['quarterly'], ignore_index=True)
    m_inject = pd.concat(frames['monthly'], ignore_index=True)
    a_wells = pd.concat(frames['wells'], ignore_index=True)
    print('Combined rows - quarterly:', q_inject.shape[0], 'monthly:', m_inject.shape[0], 'wells:', a_wells.shape[0])
    return q_inject, m_inject, a_wells


def type_monthly(m_inject):
    m_inject = m_inject.copy()
    m_inject['injection_date'] = pd.to_datetime(m_inject['injection_date'], errors='coerce')
    for col in MONTHLY_NUMERIC:
        m_inject[col] = pd.to_numeric(m_inject[col], errors='coerce')
    m_inject.rename(columns={'steam_water_injected': VOLUME_COLUMN}, inplace=True)
    m_inject['quarter'] = m_inject['injection_date'].dt.quarter.astype('Int64')

    m_inject['water_source_text'] = water_codes.label_codes(m_inject['water_source'], water_codes.MONTHLY_WATER_SOURCE)
    m_inject['water_kind_text'] = water_codes.label_codes(m_inject['water_kind'], water_codes.MONTHLY_WATER_KIND)
    return m_inject


def type_quarterly(q_inject):
    q_inject = q_inject.copy()
    q_inject['injection_report_date'] = pd.to_datetime(q_inject['injection_report_date'], errors='coerce')
    q_inject['steam_water_injected'] = pd.to_numeric(q_inject['steam_water_injected'], errors='coerce')
    q_inject.rename(columns={'steam_water_injected': VOLUME_COLUMN}, inplace=True)
    q_inject['quarter'] = q_inject['injection_report_date'].dt.quarter.astype('Int64')

    q_inject['water_source_text'] = water_codes.label_codes(q_inject['water_source_type'], water_codes.QUARTERLY_WATER_SOURCE)
    q_inject['treatment'] = water_codes.treatment_token(q_inject)
    q_inject['suitability'] = water_codes.classify_suitability(q_inject)
    return q_inject


def save_snapshot(data, snapshot_file=SNAPSHOT_FILE):
    print('Saving snapshot to', snapshot_file)
    pd.to_pickle(data._asdict(), snapshot_file)


def load_snapshot(snapshot_file=SNAPSHOT_FILE):
    tables = pd.read_pickle(snapshot_file)
    return InjectionData(**tables)


if __name__ == "__main__":
    args = sys.argv
    main(args)
