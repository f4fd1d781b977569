import pandas as pd
import pytest
import injection_prep

QUARTERLY_DEFAULTS = {
    'api': '0402900001',
    'injection_report_date': '2018-03-31',
    'steam_water_injected': '0',
    'water_source_type': '01',
    'water_source_name': None,
    'suitable_water': 'N',
    'treatment_filtration': 'N',
    'treatment_softening': 'N',
    'treatment_oil_removal': 'N',
    'treatment_reverse_osmosis': 'N',
    'treatment_other': 'N',
    'well_type_code': 'WF',
    'year': 2018,
    'county': 'Kern',
    'operator_name': 'Operator A',
}

MONTHLY_DEFAULTS = {
    'api': '0402900001',
    'injection_date': '2018-01-31',
    'steam_water_injected': '0',
    'gas_air_injected': None,
    'days_injecting': '31',
    'surface_injection_pressure': None,
    'casing_injection_pressure': None,
    'water_source': '1',
    'water_kind': '1',
    'well_type_code': 'WF',
    'year': 2018,
    'county': 'Kern',
    'operator_name': 'Operator A',
}


@pytest.fixture
def make_quarterly():
    def _make(rows):
        df = pd.DataFrame([dict(QUARTERLY_DEFAULTS, **row) for row in rows])
        return injection_prep.type_quarterly(df)
    return _make


@pytest.fixture
def make_monthly():
    def _make(rows):
        df = pd.DataFrame([dict(MONTHLY_DEFAULTS, **row) for row in rows])
        return injection_prep.type_monthly(df)
    return _make


@pytest.fixture
def make_data(make_quarterly, make_monthly):
    def _make(quarterly_rows, monthly_rows=None):
        q_inject = make_quarterly(quarterly_rows)
        m_inject = make_monthly(monthly_rows or [{}])
        return injection_prep.InjectionData(q_inject=q_inject, m_inject=m_inject, wells=pd.DataFrame())
    return _make
