"""
Tests — pad batch ID format.

@file inventory/tests/test_identifiers.py
"""

import datetime
import re

from inventory import identifiers

PAD_ID_RE = re.compile(r'^PAD/\d{8}/[A-Z]{1,3}/[A-Z0-9]{0,3}/\d{3}$')


class TestBrandCode:

    def test_first_three_letters_upper(self):
        assert identifiers.brand_code('Always Ultra') == 'ALW'

    def test_spaces_removed_before_slicing(self):
        assert identifiers.brand_code('Generic Brand') == 'GEN'
        assert identifiers.brand_code('A B C D') == 'ABC'


class TestSupplierInitials:

    def test_initials_of_each_word(self):
        assert identifiers.supplier_initials('Hope for girls') == 'HFG'

    def test_max_three_initials(self):
        assert identifiers.supplier_initials('Red Cross Society of Nigeria') == 'RCS'

    def test_single_word(self):
        assert identifiers.supplier_initials('unicef') == 'U'


class TestGeneratePadBatchId:

    def test_format(self):
        pad_id = identifiers.generate_pad_batch_id(
            'Always Ultra', 'Hope Foundation', on_date=datetime.date(2025, 1, 9),
        )
        assert pad_id.startswith('PAD/20250109/ALW/HF/')
        assert PAD_ID_RE.match(pad_id)

    def test_suffix_in_range(self):
        for _ in range(200):
            suffix = int(identifiers.generate_pad_batch_id('Kotex', 'Ngo').rsplit('/', 1)[1])
            assert 100 <= suffix <= 999

    def test_uses_suffix_source(self, monkeypatch):
        monkeypatch.setattr(identifiers, '_random_suffix', lambda: 417)
        pad_id = identifiers.generate_pad_batch_id(
            'Stayfree', 'Lagos State Ministry', on_date=datetime.date(2024, 12, 31),
        )
        assert pad_id == 'PAD/20241231/STA/LSM/417'
