"""
Sub-package Documentation
============================

This is the package responsible for pairing reads between a forward and a reverse file and
for converting between separate and interleaved files.

Output Files
--------------

+-----------+------------------------------------------+------------------------------------------------------+
| task      | outputs                                  | content                                              |
+===========+==========================================+======================================================+
| addinfo   | ``--outfile``                            | input reads with /1 or /2 added to the names         |
+-----------+------------------------------------------+------------------------------------------------------+
| makepairs | ``--forw_paired`` ``--rev_paired``       | forward and reverse reads which have a mate          |
|           | ``--forw_unpaired`` ``--rev_unpaired``   | forward and reverse reads without a mate             |
+-----------+------------------------------------------+------------------------------------------------------+
| joinpairs | ``--outfile``                            | pairs, forward read followed by its reverse mate     |
+-----------+------------------------------------------+------------------------------------------------------+
| splitpairs| ``--forward`` ``--reverse``              | the reads of an interleaved file split by mate       |
+-----------+------------------------------------------+------------------------------------------------------+


Algorithm Overview
---------------------

- read names are normalized by stripping the pair information

    - a trailing /1 or /2 on the name (Illumina 1.3+)
    - otherwise the leading pair number of the comment (Illumina 1.8+, ex. ``r1 1:N:0:ACGT``)

- one input is loaded into a sequence store keyed by the normalized name
- the other input is streamed and each read is looked up in the store

    - matched reads are removed from the store and written with their mate
    - unmatched reads are singletons

- reads remaining in the store are the singletons of the stored input
"""
