# Overview: Service layer; workflow engine, entity store and supporting services.
