from ._symmetrize import antisymmetrize, exchange_symmetrize, merge_terms, symmetrize
