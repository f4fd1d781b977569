'''
Background:
Latitude, longitude and field name for each well come from the CalGEM WellSTAR
GIS service (the Wells layer). The service is an ArcGIS REST map server, the query
endpoint gives back the attribute table in pages (the server caps each response,
and says so with exceededTransferLimit).

The geometry is not needed, only the attribute columns are kept.
The wells are keyed by the 10 character API number (no sidetrack suffix), so
the registry API is cut to 10 characters before joining.

The service is only hit once, the result is cached to a csv and every later step
reads the cache.
'''

import os
import requests
import pandas as pd

WELLS_LAYER_URL = 'https://gis.conservation.ca.gov/server/rest/services/WellSTAR/Wells/MapServer/0'
WELLS_LOCATIONS_FILE = 'wells_locations.csv'
PAGE_SIZE = 2000
TIMEOUT = 120

LOCATION_FIELDS = {
    'API': 'api10',
    'Latitude': 'lat',
    'Longitude': 'lon',
    'FieldName': 'field_name',
}
REGISTRY_FIELDS = ['api', 'operator_code', 'operator_name', 'county', 'year']


def fetch_well_locations(url=WELLS_LAYER_URL, page_size=PAGE_SIZE, session=None):
    session = session or requests.Session()
    query_url = url.rstrip('/') + '/query'
    records = []
    offset = 0

    while True:
        params = {
            'where': '1=1',
            'outFields': ','.join(LOCATION_FIELDS.keys()),
            'returnGeometry': 'false',
            'orderByFields': 'API',
            'resultOffset': offset,
            'resultRecordCount': page_size,
            'f': 'json',
        }
        response = session.get(query_url, params=params, timeout=TIMEOUT)
        response.raise_for_status()
        payload = response.json()

        # ArcGIS sends errors back with a 200 status
        if 'error' in payload:
            raise RuntimeError('Well location service error: {}'.format(payload['error']))

        features = payload.get('features', [])
        records.extend(feature['attributes'] for feature in features)
        print('Fetched', len(records), 'well locations so far')

        if not features or not payload.get('exceededTransferLimit'):
            break
        offset += len(features)

    locations_df = pd.DataFrame(records, columns=list(LOCATION_FIELDS.keys()))
    locations_df.rename(columns=LOCATION_FIELDS, inplace=True)
    locations_df = locations_df[locations_df['api10'].notnull()].copy()
    locations_df['api10'] = locations_df['api10'].astype(str)
    return locations_df


def load_well_locations(cache_file=WELLS_LOCATIONS_FILE, url=WELLS_LAYER_URL):
    if os.path.exists(cache_file):
        print('Reading cached well locations from', cache_file)
        return pd.read_csv(cache_file, dtype={'api10': str, 'field_name': str})

    print('No cached well locations, fetching from', url)
    locations_df = fetch_well_locations(url)
    locations_df.to_csv(cache_file, index=False)
    return locations_df


def check_unique_keys(df, keys):
    dups = df[df.duplicated(subset=keys, keep=False)]
    if dups.shape[0] > 0:
        raise ValueError('{} rows share a {} key, first ones:\n{}'.format(
            dups.shape[0], keys, dups.head(10)))
    return df


def prepare_registry(a_wells, locations_df):
    print('Remove dups from the well registry')
    registry_df = a_wells[REGISTRY_FIELDS].drop_duplicates()
    registry_df = registry_df.copy()
    registry_df['api10'] = registry_df['api'].str[:10]

    print('Keep one location per api10')
    locations_nd_df = locations_df.drop_duplicates(subset=['api10'])
    dropped = locations_df.shape[0] - locations_nd_df.shape[0]
    if dropped > 0:
        print('Dropped', dropped, 'repeated location rows')

    print('Merge locations onto the registry')
    registry_df = pd.merge(registry_df, locations_nd_df, on='api10', how='left', validate='many_to_one')
    print('Registry rows without a location:', registry_df['lat'].isnull().sum())

    # one registry row per well and year, otherwise the injection join fans out
    check_unique_keys(registry_df, ['api', 'year'])
    return registry_df


def join_registry(inject_df, registry_df):
    joined_df = pd.merge(inject_df, registry_df, on=['api', 'year'], how='left', validate='many_to_one')
    print('Injection rows without a registry match:', joined_df['operator_name'].isnull().sum())
    return joined_df
