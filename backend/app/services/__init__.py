# Services package init
"""
Species Catalog Backend — Services Layer
========================================

What:  Business logic between the routes (HTTP) and the database.
How:   Each service is a plain class with one module-level instance. Methods
       take an AsyncSession and return schema objects; they raise the
       exceptions in app.exceptions and never touch HTTP.

Service Inventory:
    - SpeciesService: species CRUD and the author-only rule
    - CommentService: posting comments, reading them grouped by species
    - ProfileService: display-name lookups with the "No name" fallback
    - ListingService: composes the listing page from the three above
"""
