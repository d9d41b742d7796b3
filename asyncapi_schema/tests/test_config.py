from asyncapi_schema.config import DocsConfig, SchemaConfig


class TestSchemaConfig:
    def test_defaults(self):
        config = SchemaConfig()
        assert config.strict is False
        assert config.unsigned_integer_formats is True
        assert config.ref_prefix == "#/$defs/"
        assert config.docs == DocsConfig()

    def test_from_dict(self):
        config = SchemaConfig.from_dict({"strict": True, "docs": {"title_level": 2}, "unknown": 1})
        assert config.strict is True
        assert config.docs.title_level == 2
        assert config.docs.include_examples is True
        assert not hasattr(config, "unknown")

    def test_dict_round_trip(self):
        config = SchemaConfig(indent=4, ref_prefix="#/definitions/", docs=DocsConfig(include_examples=False))
        assert SchemaConfig.from_dict(config.to_dict()) == config
