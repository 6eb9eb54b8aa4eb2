"""
Sub-package Documentation
============================

This is the package responsible for pairing calls of a main variant set with the calls of other
sets, to determine which calls from different technologies describe the same event.

Output Files
--------------

+----------------------------+------------------+------------------------------------------------------------+
| expected name/suffix       | file type/format | content                                                    |
+============================+==================+============================================================+
| ``<output>``               | text/tabbed      | one row per main variant with its match in each other set  |
+----------------------------+------------------+------------------------------------------------------------+
| ``<statistics_output>``    | text/tabbed      | match counts and rates for each swept threshold            |
+----------------------------+------------------+------------------------------------------------------------+


Algorithm Overview
---------------------

- remove variants with a breakpoint in an excluded region
- remove variants of types which were not requested
- for each other set

    - group the other variants by chromosome pair and type and sort each group by position
    - for each main variant (in input order)

        - search the group of the same chromosomes and type within the window allowed by the
          distance and overlap thresholds
        - fail if a breakpoint is further than the distance threshold
        - fail if the overlap (intersection over union) is less than the overlap threshold
        - fail if the ratio of the event sizes is less than the minimal proportion
        - fail if no genes are shared (when required)
        - take the closest remaining candidate, which cannot be matched again

- optionally repeat the matching over lists of distance and overlap thresholds to compute match rates
"""
from .pairing import equivalent, match_variants
