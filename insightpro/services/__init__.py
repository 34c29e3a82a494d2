# Services package.
#
# One module per aggregate, each a set of async functions holding the
# business rules and database access:
#
#   account_service : registration and login (password hash, JWT)
#   product_service : product CRUD with embedded comments + read cache
#
# Every function takes an AsyncSession first; the ``get_db`` dependency in
# the router layer owns the transaction and commits once per request.
# Failures are raised as ``insightpro.exceptions`` errors.
