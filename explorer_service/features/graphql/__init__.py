"""GraphQL API over indexed chain data.

The router is created on demand by ``app/router.py`` so that importing the
package does not build the schema.
"""
